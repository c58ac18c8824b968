"""Keyword-driven decoration: icons, sentiment emoji, and editorial hints.

Every heuristic here is an ordered rule table evaluated top to bottom; the
first rule whose keywords appear in the text wins. Matching is case-insensitive
and anchored at the start of a word. Keywords longer than three characters
match as word prefixes (``launch`` matches "launched", ``tool`` matches
"tools"); shorter ones must be whole words with an optional ``s``/``es``
(``ai`` does not match "email" or "aim").
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Sequence

from .models import ArticleEntry

DEFAULT_CONTENT_EMOJI = "🔥"
DEFAULT_SENTIMENT_EMOJI = "📄"

CONTENT_TYPE_ICONS: dict[str, str] = {
    "youtube": "🎥",
    "pdf": "📄",
}

CONTENT_EMOJI_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("video", "youtube"), "🎥"),
    (("pdf", "guide", "documentation"), "📄"),
    (("tool", "platform", "app"), "🛠️"),
    (("research", "study", "analysis"), "📊"),
    (("how to", "tutorial", "guide"), "📚"),
    (("announcement", "release", "launch"), "📢"),
    (("ai", "machine learning", "llm"), "🤖"),
    (("performance", "optimization", "speed"), "⚡"),
    (("security", "privacy", "vulnerability"), "🔒"),
)

SENTIMENT_EMOJI: dict[str, str] = {
    "positive": "😊",
    "very positive": "😊",
    "negative": "😟",
    "very negative": "😟",
    "neutral": "😐",
    "mixed": "🤔",
}

# Recognised technical terms, in display form. Matching is case-insensitive.
TECHNICAL_TERMS: tuple[str, ...] = (
    "Kubernetes", "Docker", "Terraform", "React", "Vue", "Angular", "Svelte",
    "Next.js", "Node.js", "Deno", "Bun", "TypeScript", "JavaScript", "Python",
    "Rust", "Go", "Golang", "Java", "Kotlin", "Swift", "WebAssembly",
    "PostgreSQL", "Postgres", "MySQL", "SQLite", "Redis", "Kafka", "GraphQL",
    "gRPC", "OpenTelemetry", "Prometheus", "Grafana", "GitHub Actions", "AWS",
    "Azure", "GCP", "LLM", "GPT", "Claude", "Gemini", "Llama", "PyTorch",
    "TensorFlow", "LangChain", "RAG", "API",
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "how",
        "in", "into", "is", "it", "its", "new", "of", "on", "or", "our", "the",
        "this", "that", "to", "we", "what", "when", "why", "with", "you", "your",
        "introducing", "announcing", "using", "building", "about", "more",
    }
)

# Rules return a template filled with ``title``, ``tool`` and ``term``.
ACTIONABLE_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("api",), "Test the API changes described in \"{title}\" against your integrations"),
    (("tool", "library"), "Evaluate {tool} for a small task in your current stack"),
    (("security",), "Audit your services for the security issues raised in \"{title}\""),
    (("performance",), "Profile a critical path using the techniques from \"{title}\""),
    (("testing", "test"), "Add tests covering the patterns discussed in \"{title}\""),
    (("docker", "container"), "Containerize one service following the approach in \"{title}\""),
    (("ai", "llm", "ml"), "Experiment with the AI techniques from \"{title}\" in a prototype"),
    (("database",), "Optimize a slow database query using insights from \"{title}\""),
    (("monitoring", "observability"), "Add monitoring for the signals highlighted in \"{title}\""),
    (("deployment", "deploy"), "Automate a deployment step inspired by \"{title}\""),
    (("react",), "Try the React patterns from \"{title}\" in a component you own"),
    (("kubernetes",), "Review your Kubernetes manifests against \"{title}\""),
    (("go", "golang"), "Prototype the Go approach from \"{title}\" in a small service"),
    (("rust",), "Spike the Rust approach from \"{title}\" on a performance-sensitive module"),
)
DEFAULT_ACTIONABLE = "Research {term} further and share findings with your team"

WHY_IT_MATTERS_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("security", "vulnerability", "breach", "cve"), "Security issues like this can directly affect the systems and users you are responsible for."),
    (("launch", "release", "announce", "available"), "A new release can change what your team builds on next quarter."),
    (("performance", "latency", "optimization", "speed"), "Performance work translates into lower costs and faster products."),
    (("ai", "llm", "model", "machine learning"), "AI capabilities are shifting quickly and shape which workflows can be automated."),
    (("pricing", "cost", "funding", "acquisition"), "Market moves like this affect vendor choices and budgets."),
    (("open source", "github", "library", "framework"), "Open-source tooling like this can be adopted without procurement overhead."),
)
DEFAULT_WHY_IT_MATTERS = "Keeps you current on developments around {term}."

PRODUCT_LAUNCHES = "Product Launches"
ENGINEERING_DEEP_DIVES = "Engineering Deep Dives"
INTERESTING_IMPLEMENTATIONS = "Interesting Implementations"
WORTH_EXPLORING = "Worth Exploring"

BRIEF_CATEGORY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("launch", "release", "released", "announce", "announced", "announcement", "update", "introducing", "available"), PRODUCT_LAUNCHES),
    (("deep dive", "deep-dive", "guide", "tutorial", "architecture", "internals", "performance", "how to"), ENGINEERING_DEEP_DIVES),
    (("built", "building", "implementation", "implemented", "case study", "case-study", "lessons", "migrated", "migration"), INTERESTING_IMPLEMENTATIONS),
)
BRIEF_CATEGORIES: tuple[str, ...] = (
    PRODUCT_LAUNCHES,
    ENGINEERING_DEEP_DIVES,
    INTERESTING_IMPLEMENTATIONS,
    WORTH_EXPLORING,
)

_CATEGORIZED_TAKE_RE = re.compile(r"^\s*(?P<category>[^|]+?) \| (?P<text>.+?)\s*$", re.DOTALL)
_SHORT_KEYWORD_LENGTH = 3


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    escaped = r"\s+".join(re.escape(part) for part in keyword.split())
    suffix = r"\w*" if len(keyword) > _SHORT_KEYWORD_LENGTH else r"(?:e?s)?(?!\w)"
    return re.compile(rf"(?<![\w.]){escaped}{suffix}", re.IGNORECASE)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Return True when any keyword starts a word in ``text``."""
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


def first_matching_rule(text: str, rules: Sequence[tuple[tuple[str, ...], str]]) -> str | None:
    for keywords, result in rules:
        if contains_keyword(text, keywords):
            return result
    return None


def _entry_text(entry: ArticleEntry) -> str:
    return f"{entry.title} {entry.summary_text}"


def content_type_emoji(content_type: str, title: str) -> str:
    """Pick an icon for an article from its content type, then its title."""

    icon = CONTENT_TYPE_ICONS.get((content_type or "").lower())
    if icon:
        return icon
    return first_matching_rule(title or "", CONTENT_EMOJI_RULES) or DEFAULT_CONTENT_EMOJI


def entry_icon(entry: ArticleEntry) -> str:
    """Upstream-supplied icon if present, otherwise the keyword-derived one."""
    return entry.content_icon or content_type_emoji(entry.content_type, entry.title)


def sentiment_emoji(label: str) -> str:
    return SENTIMENT_EMOJI.get((label or "").strip().lower(), DEFAULT_SENTIMENT_EMOJI)


def _candidate_words(text: str) -> list[str]:
    return [word.strip(".,:;!?()[]\"'") for word in text.split()]


def _find_technical_term(text: str) -> str | None:
    for term in TECHNICAL_TERMS:
        if contains_keyword(text, (term,)):
            return term
    return None


def extract_tool_name(entry: ArticleEntry) -> str:
    """Best guess at the tool or library an article is about."""

    term = _find_technical_term(entry.title)
    if term:
        return term
    for word in _candidate_words(entry.title):
        if word and word[0].isupper() and word.lower() not in STOP_WORDS:
            return word
    return "the tool"


def extract_key_term(entry: ArticleEntry) -> str:
    """Best guess at the central subject of an article."""

    term = _find_technical_term(_entry_text(entry))
    if term:
        return term
    for word in _candidate_words(entry.title):
        if len(word) > 3 and word.lower() not in STOP_WORDS:
            return word
    return "this topic"


def match_actionable_rule(entry: ArticleEntry) -> str | None:
    """Return a specific recommendation, or None when only the default applies."""

    template = first_matching_rule(_entry_text(entry), ACTIONABLE_RULES)
    if template is None:
        return None
    return template.format(
        title=entry.title,
        tool=extract_tool_name(entry),
        term=extract_key_term(entry),
    )


def generate_actionable_item(entry: ArticleEntry) -> str:
    specific = match_actionable_rule(entry)
    if specific:
        return specific
    return DEFAULT_ACTIONABLE.format(term=extract_key_term(entry))


def generate_why_it_matters(entry: ArticleEntry) -> str:
    note = first_matching_rule(_entry_text(entry), WHY_IT_MATTERS_RULES)
    if note:
        return note
    return DEFAULT_WHY_IT_MATTERS.format(term=extract_key_term(entry))


def categorize_articles_for_brief(entries: Sequence[ArticleEntry]) -> dict[str, list[ArticleEntry]]:
    """Assign each entry to exactly one brief category, keeping input order."""

    categories: dict[str, list[ArticleEntry]] = {name: [] for name in BRIEF_CATEGORIES}
    for entry in entries:
        category = first_matching_rule(_entry_text(entry), BRIEF_CATEGORY_RULES) or WORTH_EXPLORING
        categories[category].append(entry)
    return categories


def split_categorized_take(my_take: str) -> tuple[str | None, str]:
    """Split ``"<category> | <insight>"`` into its parts."""

    match = _CATEGORIZED_TAKE_RE.match(my_take or "")
    if not match:
        return None, (my_take or "").strip()
    return match.group("category"), match.group("text")
