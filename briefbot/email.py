"""HTML email rendering with named colour themes."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from html import escape
from typing import Sequence

from .compose import MAX_RESEARCH_SUGGESTIONS
from .decorate import entry_icon
from .formats import get_profile
from .grouping import group_by_topic
from .log import get_logger
from .models import ArticleEntry, DigestInputs
from .utils import truncate_to_word_limit, unique_stripped

LOGGER = get_logger(__name__)

DEFAULT_THEME = "default"


@dataclass(slots=True, frozen=True)
class EmailTheme:
    name: str
    subject: str
    include_css: bool
    header_color: str
    background_color: str
    text_color: str
    link_color: str
    border_color: str
    max_width: str
    font_family: str
    show_topic_clusters: bool
    show_insights: bool


THEMES: dict[str, EmailTheme] = {
    "default": EmailTheme(
        name="default",
        subject="Your Briefly Digest - {Date}",
        include_css=True,
        header_color="#2563eb",
        background_color="#f8fafc",
        text_color="#1e293b",
        link_color="#3b82f6",
        border_color="#e2e8f0",
        max_width="600px",
        font_family="system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif",
        show_topic_clusters=True,
        show_insights=True,
    ),
    "newsletter": EmailTheme(
        name="newsletter",
        subject="Weekly Newsletter - {Date}",
        include_css=True,
        header_color="#059669",
        background_color="#f0fdf4",
        text_color="#064e3b",
        link_color="#10b981",
        border_color="#d1fae5",
        max_width="700px",
        font_family="Georgia, 'Times New Roman', serif",
        show_topic_clusters=True,
        show_insights=True,
    ),
    "minimal": EmailTheme(
        name="minimal",
        subject="Digest - {Date}",
        include_css=True,
        header_color="#374151",
        background_color="#ffffff",
        text_color="#111827",
        link_color="#6366f1",
        border_color="#e5e7eb",
        max_width="560px",
        font_family="Inter, system-ui, sans-serif",
        show_topic_clusters=False,
        show_insights=False,
    ),
}

_CSS_TEMPLATE = (
    "body,table,td,p,a,li{{-webkit-text-size-adjust:100%;-ms-text-size-adjust:100%;}}"
    "img{{border:0;height:auto;line-height:100%;outline:none;text-decoration:none;}}"
    "body{{margin:0!important;padding:0!important;background-color:{background};font-family:{font};color:{text};line-height:1.6;}}"
    ".container{{max-width:{width};margin:0 auto;background-color:#ffffff;border:1px solid {border};border-radius:8px;overflow:hidden;}}"
    ".header{{background-color:{header};color:#ffffff;padding:24px;text-align:center;}}"
    ".header h1{{margin:0;font-size:24px;font-weight:600;}}"
    ".header .date{{margin:8px 0 0 0;font-size:14px;opacity:0.9;}}"
    ".content{{padding:24px;}}"
    "h2{{color:{header};font-size:20px;font-weight:600;margin:32px 0 16px 0;border-bottom:2px solid {border};padding-bottom:8px;}}"
    "h3{{color:{text};font-size:18px;font-weight:600;margin:24px 0 12px 0;}}"
    "p{{margin:0 0 16px 0;font-size:16px;line-height:1.6;}}"
    "a{{color:{link};text-decoration:none;}}a:hover{{text-decoration:underline;}}"
    ".banner{{width:100%;max-width:{width};height:auto;border-radius:8px;margin-bottom:20px;}}"
    ".article-card{{background-color:#f8fafc;border:1px solid {border};border-radius:6px;padding:20px;margin:16px 0;}}"
    ".article-title{{font-size:18px;font-weight:600;color:{text};margin:0 0 12px 0;}}"
    ".article-summary{{font-size:15px;line-height:1.6;margin:0 0 16px 0;}}"
    ".article-meta{{font-size:13px;color:#64748b;margin:12px 0 0 0;}}"
    ".key-insight{{background-color:#fef3c7;padding:12px;border-radius:4px;margin:12px 0;border-left:4px solid #f59e0b;}}"
    ".alert{{color:#dc2626;font-weight:600;margin-left:12px;}}"
    ".topic-group{{margin:24px 0;border-left:4px solid {header};padding-left:16px;}}"
    ".topic-title{{color:{header};font-size:16px;font-weight:600;margin:0 0 16px 0;text-transform:uppercase;letter-spacing:0.5px;}}"
    ".insights-section{{background:linear-gradient(135deg,#f0f9ff 0%,#e0f2fe 100%);border:1px solid #bae6fd;border-radius:8px;padding:20px;margin:24px 0;}}"
    ".insight-item{{margin:12px 0;padding:12px;background-color:rgba(255,255,255,0.7);border-radius:6px;}}"
    ".insight-label{{font-weight:600;color:#0369a1;margin-bottom:4px;}}"
    ".btn{{display:inline-block;padding:12px 24px;background-color:{link};color:#ffffff;border-radius:6px;text-decoration:none;font-weight:600;margin:8px 0;}}"
    ".footer{{background-color:#f1f5f9;padding:20px 24px;text-align:center;font-size:14px;color:#64748b;border-top:1px solid {border};}}"
    "@media only screen and (max-width:600px){{.container{{margin:0!important;border-radius:0!important;}}"
    ".content,.header{{padding:16px!important;}}.article-card{{padding:16px!important;}}}}"
)


def get_theme(name: str | None) -> EmailTheme:
    key = (name or "").strip().lower()
    theme = THEMES.get(key)
    if theme is None:
        LOGGER.warning("Unknown email theme '%s', falling back to '%s'", name, DEFAULT_THEME)
        return THEMES[DEFAULT_THEME]
    return theme


def email_css(theme: EmailTheme) -> str:
    """Fill the fixed stylesheet with the theme palette."""

    return _CSS_TEMPLATE.format(
        background=theme.background_color,
        font=theme.font_family,
        text=theme.text_color,
        width=theme.max_width,
        border=theme.border_color,
        header=theme.header_color,
        link=theme.link_color,
    )


def format_email_date(date: dt.date) -> str:
    return f"{date:%B} {date.day}, {date.year}"


def generate_subject(theme: EmailTheme, title: str, date: dt.date | str) -> str:
    date_text = date if isinstance(date, str) else format_email_date(date)
    return theme.subject.replace("{Date}", date_text).replace("{Title}", title)


def _article_card(entry: ArticleEntry, max_summary_words: int, indent: str) -> list[str]:
    title = escape(entry.title)
    prefix = " ".join(part for part in (entry.sentiment_emoji, entry_icon(entry)) if part)
    parts = [
        f"{indent}<div class=\"article-card\">",
        f"{indent}  <h3 class=\"article-title\">{escape(prefix)} {title}</h3>",
    ]
    summary = entry.summary_text.strip()
    if summary:
        summary = truncate_to_word_limit(summary, max_summary_words)
        parts.append(f"{indent}  <div class=\"article-summary\">{escape(summary)}</div>")
    if entry.my_take.strip():
        parts.append(
            f"{indent}  <div class=\"key-insight\"><strong>💡 Key Insight:</strong> {escape(entry.my_take.strip())}</div>"
        )
    parts.append(f"{indent}  <div class=\"article-meta\">")
    parts.append(f"{indent}    <a href=\"{escape(entry.url)}\" class=\"btn\">Read Article</a>")
    if entry.alert_triggered:
        parts.append(f"{indent}    <span class=\"alert\">🚨 Alert Triggered</span>")
    parts.append(f"{indent}  </div>")
    parts.append(f"{indent}</div>")
    return parts


def _insights_panel(inputs: DigestInputs) -> list[str]:
    items: list[tuple[str, str]] = []
    if inputs.overall_sentiment.strip():
        items.append(("📊 Sentiment Analysis", f"<div>{escape(inputs.overall_sentiment.strip())}</div>"))
    if inputs.alerts_summary.strip():
        items.append(("🚨 Alerts", f"<div>{escape(inputs.alerts_summary.strip())}</div>"))
    if inputs.trends_summary.strip():
        items.append(("📈 Trends", f"<div>{escape(inputs.trends_summary.strip())}</div>"))
    suggestions = unique_stripped(inputs.research_suggestions, MAX_RESEARCH_SUGGESTIONS)
    if suggestions:
        rows = "".join(f"<li>{escape(item)}</li>" for item in suggestions)
        items.append(("🔍 Research Suggestions", f"<ul>{rows}</ul>"))
    if not items:
        return []

    parts = [
        "        <div class=\"insights-section\">",
        "          <h2 class=\"insights-title\">🧠 AI-Powered Insights</h2>",
    ]
    for label, body in items:
        parts.append("          <div class=\"insight-item\">")
        parts.append(f"            <div class=\"insight-label\">{label}</div>")
        parts.append(f"            {body}")
        parts.append("          </div>")
    parts.append("        </div>")
    return parts


def _articles(
    entries: Sequence[ArticleEntry],
    theme: EmailTheme,
    max_summary_words: int,
    sort_groups_by_confidence: bool,
) -> list[str]:
    if not entries:
        return []
    parts: list[str] = []
    if theme.show_topic_clusters:
        for group in group_by_topic(entries, sort_by_confidence=sort_groups_by_confidence):
            parts.append("        <div class=\"topic-group\">")
            parts.append(f"          <h2 class=\"topic-title\">📑 {escape(group.topic_cluster)}</h2>")
            for entry in group.articles:
                parts.extend(_article_card(entry, max_summary_words, "          "))
            parts.append("        </div>")
    else:
        parts.append("        <h2>📄 Articles</h2>")
        for entry in entries:
            parts.extend(_article_card(entry, max_summary_words, "        "))
    return parts


def render_html_email(
    inputs: DigestInputs,
    theme: EmailTheme,
    *,
    date: dt.date | None = None,
    sort_groups_by_confidence: bool = True,
) -> str:
    """Render a complete HTML email document.

    Texts and budgets come from the ``email`` format profile; the theme decides
    the palette and whether topic groups and the insights panel are shown.
    """

    date = date or dt.date.today()
    profile = get_profile("email")
    title = inputs.custom_title.strip() or profile.title
    date_text = format_email_date(date)

    parts: list[str] = [
        "<!DOCTYPE html>",
        "<html lang=\"en\">",
        "<head>",
        "  <meta charset=\"utf-8\">",
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">",
        f"  <title>{escape(title)}</title>",
    ]
    if theme.include_css:
        parts.append(f"  <style type=\"text/css\">{email_css(theme)}</style>")
    parts.extend(
        [
            "</head>",
            "<body>",
            "  <table role=\"presentation\" cellspacing=\"0\" cellpadding=\"0\" border=\"0\" width=\"100%\">",
            "  <tr><td align=\"center\">",
            "    <div class=\"container\">",
            "      <div class=\"header\">",
            f"        <h1>{escape(title)}</h1>",
            f"        <p class=\"date\">{escape(date_text)}</p>",
            "      </div>",
            "      <div class=\"content\">",
        ]
    )

    banner = inputs.banner
    if profile.include_banner and banner is not None and banner.image_url:
        alt_text = banner.alt_text or "AI-generated banner"
        parts.append(
            f"        <img class=\"banner\" src=\"{escape(banner.image_url)}\" alt=\"{escape(alt_text)}\" />"
        )
    if profile.intro_text:
        parts.append(f"        <p>{escape(profile.intro_text)}</p>")
    if inputs.executive_summary.strip():
        parts.append("        <h2>📋 Executive Summary</h2>")
        parts.append(f"        <p>{escape(inputs.executive_summary.strip())}</p>")
    if theme.show_insights:
        parts.extend(_insights_panel(inputs))
    parts.extend(_articles(inputs.entries, theme, profile.max_summary_words, sort_groups_by_confidence))
    if profile.conclusion_text:
        parts.append("        <h2>🎯 Conclusion</h2>")
        parts.append(f"        <p>{escape(profile.conclusion_text)}</p>")

    parts.extend(
        [
            "      </div>",
            "      <div class=\"footer\">",
            f"        <p>Generated by Briefly on {escape(date_text)}</p>",
            "        <p style=\"font-size: 12px; margin-top: 8px;\">This digest was created using AI-powered analysis and insights.</p>",
            "      </div>",
            "    </div>",
            "  </td></tr>",
            "  </table>",
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(parts) + "\n"
