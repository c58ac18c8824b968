"""Section composer: turns digest inputs into an ordered list of Markdown blocks."""
from __future__ import annotations

import datetime as dt
from typing import Iterable, Protocol, Sequence

from .decorate import (
    DEFAULT_ACTIONABLE,
    entry_icon,
    extract_key_term,
    match_actionable_rule,
    sentiment_emoji,
    split_categorized_take,
)
from .formats import FormatProfile
from .grouping import group_by_topic
from .log import get_logger
from .models import ArticleEntry, BannerImage, ComposedDigest, ContentBlock, DigestInputs
from .utils import (
    capitalise_first,
    count_words,
    estimate_read_time,
    truncate_to_complete_sentence,
    truncate_to_word_limit,
    unique_stripped,
)

LOGGER = get_logger(__name__)

TITLE = "title"
WORD_COUNT = "word_count"
BANNER = "banner"
INTRO = "intro"
EXECUTIVE_SUMMARY = "executive_summary"
ALERTS = "alerts"
INSIGHTS = "insights"
ACTIONS = "actions"
ARTICLES = "articles"
CONCLUSION = "conclusion"
PROMPT_CORNER = "prompt_corner"
MY_TAKE = "my_take"
REFERENCES = "references"

# Blocks at the top of the document are separated by a blank line, not a rule.
HEADING_BLOCKS = frozenset({TITLE, WORD_COUNT, BANNER, INTRO})
BLOCK_DIVIDER = "\n\n---\n\n"

EXECUTIVE_SUMMARY_WORD_LIMIT = 150
MAX_RESEARCH_SUGGESTIONS = 8
MAX_ACTION_ITEMS = 3
MIN_ACTION_ITEMS = 2
HIGH_CONFIDENCE = 0.7
DEFAULT_BANNER_ALT = "AI-generated banner"
GENERIC_ACTION = "Share the most useful article from this digest with your team"

SCANNABLE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("🔥", "Breaking & Hot"),
    ("🚀", "Product Updates"),
    ("🛠️", "Dev Tools & Techniques"),
    ("📊", "Research & Analysis"),
    ("💡", "Ideas & Inspiration"),
    ("🔍", "Worth Monitoring"),
)
ADDITIONAL_ITEMS = "Additional Items"


class PromptCornerGenerator(Protocol):
    def generate(self, summary_text: str) -> str: ...


def assemble_markdown(blocks: Sequence[ContentBlock]) -> str:
    """Join blocks into one document; heading blocks share a blank-line join."""

    if not blocks:
        return ""
    parts = [blocks[0].text.strip()]
    previous = blocks[0].name
    for block in blocks[1:]:
        if previous in HEADING_BLOCKS and block.name in HEADING_BLOCKS:
            parts.append("\n\n")
        else:
            parts.append(BLOCK_DIVIDER)
        parts.append(block.text.strip())
        previous = block.name
    return "".join(parts) + "\n"


def _render_title(inputs: DigestInputs, profile: FormatProfile, date: dt.date) -> str:
    title = inputs.custom_title.strip() or profile.title
    return f"# {title} — {date.isoformat()}"


def _render_banner(banner: BannerImage) -> str:
    alt_text = banner.alt_text or DEFAULT_BANNER_ALT
    lines = [f"![{alt_text}]({banner.image_url})"]
    if banner.themes:
        lines.append("")
        lines.append(f"*Featured themes: {', '.join(banner.themes)}*")
    return "\n".join(lines)


def _render_executive_summary(summary: str, profile: FormatProfile) -> str:
    text = summary.strip()
    if profile.enforces_digest_budget:
        text = truncate_to_word_limit(text, EXECUTIVE_SUMMARY_WORD_LIMIT)
    return f"## Executive Summary\n\n{text}"


def _is_flagged(entry: ArticleEntry) -> bool:
    return entry.alert_triggered or bool(entry.alert_conditions)


def _render_alerts(inputs: DigestInputs) -> str | None:
    if inputs.alerts_summary.strip():
        return inputs.alerts_summary.strip()

    flagged = [entry for entry in inputs.entries if _is_flagged(entry)]
    if not flagged:
        return None

    noun = "article" if len(flagged) == 1 else "articles"
    lines = [
        "### ✅ Alert Monitoring",
        "",
        f"Monitoring is active. {len(flagged)} {noun} matched alert conditions:",
        "",
    ]
    for entry in flagged:
        line = f"- {entry.title}"
        if entry.alert_conditions:
            line += f" ({', '.join(entry.alert_conditions)})"
        lines.append(line)
    return "\n".join(lines)


def _sentiment_distribution(entries: Iterable[ArticleEntry]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in entries:
        label = entry.sentiment_label.strip()
        if label:
            counts[label] = counts.get(label, 0) + 1
    return counts


def _render_insights(inputs: DigestInputs, profile: FormatProfile) -> str | None:
    if not (profile.include_key_insights or profile.name in {"detailed", "newsletter"}):
        return None

    sections: list[str] = []

    distribution = _sentiment_distribution(inputs.entries)
    overall = inputs.overall_sentiment.strip()
    if overall or distribution:
        lines = ["### 📊 Sentiment Analysis", ""]
        if overall:
            lines.extend([overall, ""])
        if distribution:
            lines.append("**Article Sentiment Distribution:**")
            for label, count in distribution.items():
                lines.append(f"- {sentiment_emoji(label)} {capitalise_first(label)}: {count} articles")
        sections.append("\n".join(lines).strip())

    trends = inputs.trends_summary.strip()
    if trends:
        sections.append(f"### 📈 Trend Analysis\n\n{trends}")

    suggestions = unique_stripped(inputs.research_suggestions, MAX_RESEARCH_SUGGESTIONS)
    if suggestions:
        lines = [
            "### 🔍 Research Suggestions",
            "",
            "*Queries for deeper exploration of these topics:*",
            "",
        ]
        lines.extend(f"{idx}. {suggestion}" for idx, suggestion in enumerate(suggestions, start=1))
        sections.append("\n".join(lines))

    if not sections:
        return None
    return "## 🧠 AI-Powered Insights\n\n" + "\n\n".join(sections)


def collect_action_items(entries: Sequence[ArticleEntry]) -> list[str]:
    """Pick up to three rule-based actions, topping up to two with fallbacks."""

    items: list[str] = []
    for entry in entries:
        specific = match_actionable_rule(entry)
        if specific and specific not in items:
            items.append(specific)
        if len(items) >= MAX_ACTION_ITEMS:
            return items

    if len(items) < MIN_ACTION_ITEMS:
        for entry in entries:
            fallback = DEFAULT_ACTIONABLE.format(term=extract_key_term(entry))
            if fallback not in items:
                items.append(fallback)
            if len(items) >= MIN_ACTION_ITEMS:
                break
    if len(items) < MIN_ACTION_ITEMS and GENERIC_ACTION not in items:
        items.append(GENERIC_ACTION)
    return items


def _render_actions(entries: Sequence[ArticleEntry]) -> str:
    items = collect_action_items(entries)
    lines = ["## ⚡ Action Items", ""]
    lines.extend(f"- {item}" for item in items)
    return "\n".join(lines)


def _format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def _metadata_line(entry: ArticleEntry) -> str | None:
    if entry.content_type in {"", "html"}:
        return None
    parts: list[str] = []
    if entry.content_label:
        parts.append(entry.content_label)
    if entry.duration > 0:
        parts.append(_format_duration(entry.duration))
    if entry.channel:
        parts.append(f"by {entry.channel}")
    if entry.page_count > 0:
        parts.append(f"{entry.page_count} pages")
    if not parts:
        return None
    return f"*{' • '.join(parts)}*"


def _entry_sentiment_emoji(entry: ArticleEntry) -> str:
    if entry.sentiment_emoji:
        return entry.sentiment_emoji
    if entry.sentiment_label:
        return sentiment_emoji(entry.sentiment_label)
    return ""


def _insight_text(entry: ArticleEntry) -> str:
    _, text = split_categorized_take(entry.my_take)
    return text


def _render_article_body(entry: ArticleEntry, profile: FormatProfile) -> list[str]:
    """Metadata, relevance, alert, summary and insight paragraphs for one article."""

    paragraphs: list[str] = []
    metadata = _metadata_line(entry)
    if metadata:
        paragraphs.append(metadata)
    if entry.topic_confidence > HIGH_CONFIDENCE:
        paragraphs.append(f"*Topic relevance: {entry.topic_confidence * 100:.0f}%*")
    if entry.alert_triggered and entry.alert_conditions:
        paragraphs.append(f"🚨 **Alert:** {', '.join(entry.alert_conditions)}")
    if profile.include_summaries and entry.summary_text.strip():
        paragraphs.append(truncate_to_word_limit(entry.summary_text.strip(), profile.max_summary_words))
    insight = _insight_text(entry)
    if profile.include_key_insights and insight:
        paragraphs.append(f"**Key Insight:** {insight}")
    return paragraphs


def _article_title(entry: ArticleEntry) -> str:
    return " ".join(part for part in (_entry_sentiment_emoji(entry), entry_icon(entry), entry.title) if part)


def _render_grouped_article(entry: ArticleEntry, profile: FormatProfile) -> str:
    paragraphs = [f"#### {_article_title(entry)}"]
    paragraphs.extend(_render_article_body(entry, profile))
    if profile.include_source_links and entry.url:
        paragraphs.append(f"🔗 [Read more]({entry.url})")
    return "\n\n".join(paragraphs)


def _render_flat_article(position: int, entry: ArticleEntry, profile: FormatProfile) -> str:
    paragraphs = [f"### {position}. {_article_title(entry)}"]
    paragraphs.extend(_render_article_body(entry, profile))
    paragraphs.append(f"[^{position}]: {entry.url}")
    return "\n\n".join(paragraphs)


def _render_grouped_articles(
    entries: Sequence[ArticleEntry],
    profile: FormatProfile,
    sort_groups_by_confidence: bool,
) -> str:
    sections: list[str] = []
    for group in group_by_topic(entries, sort_by_confidence=sort_groups_by_confidence):
        rendered = profile.section_separator.join(
            _render_grouped_article(entry, profile) for entry in group.articles
        )
        sections.append(f"### 📑 {group.topic_cluster}\n\n{rendered}")
    return "## Individual Articles\n\n" + "\n\n".join(sections)


def _render_flat_articles(entries: Sequence[ArticleEntry], profile: FormatProfile) -> str:
    rendered = profile.section_separator.join(
        _render_flat_article(position, entry, profile)
        for position, entry in enumerate(entries, start=1)
    )
    return f"## Individual Articles\n\n{rendered}"


def _scannable_item(position: int, entry: ArticleEntry, profile: FormatProfile) -> str:
    lines = [f"**{position}. {entry_icon(entry)} [{entry.title}]({entry.url})**"]
    summary = entry.summary_text.strip()
    if profile.include_summaries and summary:
        lines.append(truncate_to_complete_sentence(summary, profile.max_summary_words))
    insight = _insight_text(entry)
    if insight:
        lines.append(f"→ {insight}")
    return "\n".join(lines)


def _scannable_category(entry: ArticleEntry) -> str | None:
    token, _ = split_categorized_take(entry.my_take)
    if token is None:
        return None
    for emoji, name in SCANNABLE_CATEGORIES:
        if name.lower() in token.lower():
            return f"{emoji} {name}"
    return None


def _render_scannable_articles(entries: Sequence[ArticleEntry], profile: FormatProfile) -> str:
    categorised = any(split_categorized_take(entry.my_take)[0] for entry in entries)
    if not categorised:
        rendered = profile.section_separator.join(
            _scannable_item(position, entry, profile)
            for position, entry in enumerate(entries, start=1)
        )
        return f"## 📋 Quick Scan\n\n{rendered}"

    buckets: dict[str, list[ArticleEntry]] = {f"{emoji} {name}": [] for emoji, name in SCANNABLE_CATEGORIES}
    remainder: list[ArticleEntry] = []
    for entry in entries:
        category = _scannable_category(entry)
        if category is None:
            remainder.append(entry)
        else:
            buckets[category].append(entry)

    ordered: list[tuple[str, list[ArticleEntry]]] = [(name, items) for name, items in buckets.items() if items]
    if remainder:
        ordered.append((ADDITIONAL_ITEMS, remainder))

    sections: list[str] = []
    position = 0
    for heading, items in ordered:
        rendered: list[str] = []
        for entry in items:
            position += 1
            rendered.append(_scannable_item(position, entry, profile))
        sections.append(f"### {heading}\n\n" + profile.section_separator.join(rendered))
    return "## 📋 Quick Scan\n\n" + "\n\n".join(sections)


def _render_articles(
    entries: Sequence[ArticleEntry],
    profile: FormatProfile,
    sort_groups_by_confidence: bool,
) -> str:
    if profile.is_scannable:
        return _render_scannable_articles(entries, profile)
    if profile.include_topic_clustering:
        return _render_grouped_articles(entries, profile, sort_groups_by_confidence)
    return _render_flat_articles(entries, profile)


def _render_prompt_corner(generator: PromptCornerGenerator, summary: str) -> str | None:
    try:
        text = generator.generate(summary)
    except Exception as exc:
        LOGGER.warning("Prompt corner generation failed; omitting section: %s", exc)
        return None
    if not text or not text.strip():
        LOGGER.warning("Prompt corner generator returned no text; omitting section")
        return None
    return f"## 🎯 Prompt Corner\n\n{text.strip()}"


def _render_references(entries: Sequence[ArticleEntry]) -> str:
    rows: list[str] = []
    for idx, entry in enumerate(entries, start=1):
        row = f"[{idx}] {entry.url}"
        if entry.title:
            row += f"\n    *{entry.title}*"
        rows.append(row)
    return "## References\n\n" + "\n\n".join(rows)


def _word_count_block(blocks: Sequence[ContentBlock], profile: FormatProfile) -> ContentBlock | None:
    if not profile.enforces_digest_budget:
        return None
    words = count_words(assemble_markdown(blocks))
    if words <= 0:
        return None
    if words > profile.max_digest_words:
        LOGGER.warning(
            "Digest '%s' is %s words, over its %s word budget",
            profile.name,
            words,
            profile.max_digest_words,
        )
    return ContentBlock(WORD_COUNT, f"*{words} words • {estimate_read_time(words)} read*")


def compose_digest(
    inputs: DigestInputs,
    profile: FormatProfile,
    *,
    date: dt.date | None = None,
    prompt_corner: PromptCornerGenerator | None = None,
    sort_groups_by_confidence: bool = True,
) -> ComposedDigest:
    """Run the section pipeline for one digest.

    Each stage contributes a block only when the profile enables it and it has
    something to say; an empty entry list still yields the title and any
    static intro or conclusion text.
    """

    date = date or dt.date.today()
    entries = inputs.entries
    scannable = profile.is_scannable
    blocks: list[ContentBlock] = []

    def emit(name: str, text: str | None) -> None:
        if text and text.strip():
            blocks.append(ContentBlock(name, text.strip()))

    emit(TITLE, _render_title(inputs, profile, date))
    if profile.include_banner and inputs.banner is not None and inputs.banner.image_url:
        emit(BANNER, _render_banner(inputs.banner))
    emit(INTRO, profile.intro_text)
    if inputs.executive_summary.strip():
        emit(EXECUTIVE_SUMMARY, _render_executive_summary(inputs.executive_summary, profile))
    if not scannable:
        emit(ALERTS, _render_alerts(inputs))
        emit(INSIGHTS, _render_insights(inputs, profile))
        if profile.include_action_items and entries:
            emit(ACTIONS, _render_actions(entries))
    if profile.include_individual_articles and entries:
        emit(ARTICLES, _render_articles(entries, profile, sort_groups_by_confidence))
    emit(CONCLUSION, profile.conclusion_text)
    if profile.include_prompt_corner and prompt_corner is not None and inputs.executive_summary.strip():
        emit(PROMPT_CORNER, _render_prompt_corner(prompt_corner, inputs.executive_summary.strip()))
    emit(MY_TAKE, f"## My Take\n\n{inputs.my_take.strip()}" if inputs.my_take.strip() else None)
    if entries:
        emit(REFERENCES, _render_references(entries))

    word_count = _word_count_block(blocks, profile)
    if word_count is not None:
        blocks.insert(1, word_count)

    LOGGER.debug("Composed %s digest with blocks: %s", profile.name, [block.name for block in blocks])
    return ComposedDigest(
        title=inputs.custom_title.strip() or profile.title,
        date=date,
        profile=profile,
        blocks=blocks,
    )
