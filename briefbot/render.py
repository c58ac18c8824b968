"""Markdown rendering for composed digests and team briefs."""
from __future__ import annotations

import datetime as dt
from typing import Sequence

from .compose import assemble_markdown
from .decorate import categorize_articles_for_brief, entry_icon, generate_why_it_matters
from .models import ArticleEntry, ComposedDigest
from .utils import count_words, estimate_read_time, normalise_spaces

_BRIEF_CATEGORY_ICONS = {
    "Product Launches": "🚀",
    "Engineering Deep Dives": "🔬",
    "Interesting Implementations": "🛠️",
    "Worth Exploring": "🔍",
}


def render_markdown(composed: ComposedDigest) -> str:
    """Render the composed digest to Markdown."""

    return assemble_markdown(composed.blocks)


def render_team_brief(entries: Sequence[ArticleEntry], *, date: dt.date | None = None) -> str:
    """Render a short Markdown brief for sharing with a team.

    Entries are bucketed with :func:`categorize_articles_for_brief`; empty
    categories are skipped. Each line links the article and adds a one-line
    note on why it matters.
    """

    date = date or dt.date.today()
    lines: list[str] = [f"# Team Brief — {date.isoformat()}"]

    if not entries:
        lines.append("")
        lines.append("*Nothing to share this time.*")
        return "\n".join(lines) + "\n"

    for category, items in categorize_articles_for_brief(entries).items():
        if not items:
            continue
        lines.append("")
        lines.append(f"## {_BRIEF_CATEGORY_ICONS.get(category, '📌')} {category}")
        for entry in items:
            title = normalise_spaces(entry.title) or entry.url
            lines.append(f"- {entry_icon(entry)} [{title}]({entry.url}): {generate_why_it_matters(entry)}")

    body = "\n".join(lines)
    words = count_words(body)
    lines.append("")
    lines.append("---")
    lines.append(f"{len(entries)} articles • {estimate_read_time(words)} read")
    return "\n".join(lines) + "\n"
