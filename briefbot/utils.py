"""Utility helpers for briefbot."""
from __future__ import annotations

import re
from typing import Iterable

_WORDS_PER_MINUTE = 200
_SENTENCE_SPLIT_RE = re.compile(r"[.!?](?=\s|$)")
_TELEMETRY_PATTERN = re.compile(r"^\s*(?:\w+=[^\s]+(?:\s+|$)){3,}")


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len((text or "").split())


def estimate_read_time(word_count: int) -> str:
    """Render a reading time estimate assuming 200 words per minute."""
    minutes = max(0, word_count) // _WORDS_PER_MINUTE
    if minutes == 0:
        return "<1m"
    return f"{minutes}m"


def truncate_to_word_limit(text: str, max_words: int) -> str:
    """Cut text down to ``max_words`` words, appending an ellipsis when cut.

    Text that already fits (or a non-positive limit) is returned verbatim.
    """

    if max_words <= 0:
        return text
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + "..."


def truncate_to_complete_sentence(text: str, max_words: int) -> str:
    """Keep only the first sentence found inside the word limit.

    The first sentence wins even when later sentences would also fit within
    ``max_words``. A single sentence that fits is returned unchanged; text with
    no sentence boundary falls back to :func:`truncate_to_word_limit`.
    """

    if max_words <= 0:
        return text
    words = text.split()
    fits = len(words) <= max_words

    window = " ".join(words[:max_words])
    segments = [segment.strip() for segment in _SENTENCE_SPLIT_RE.split(window)]
    segments = [segment for segment in segments if segment]
    if len(segments) > 1 or (segments and not fits and _SENTENCE_SPLIT_RE.search(window)):
        return segments[0] + "."
    if fits:
        return text
    return truncate_to_word_limit(text, max_words)


def truncate_chars(text: str, limit: int) -> str:
    """Hard-cut text to ``limit`` characters including a trailing ellipsis."""

    if limit <= 3 or len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def normalise_spaces(text: str) -> str:
    """Collapse repeated whitespace and trim surrounding spaces."""

    return re.sub(r"\s+", " ", text or "").strip()


def split_and_strip_csv(value: str | None) -> list[str]:
    """Split a comma-separated string into a list of trimmed items."""
    if not value:
        return []
    items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def capitalise_first(text: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""

    if not text:
        return text
    return text[0].upper() + text[1:]


def strip_telemetry_lines(text: str) -> str:
    """Remove lines that resemble telemetry/log output from the model response."""

    if not text:
        return ""

    artefact_keywords = (
        "message=Message(",
        "tool_calls=",
        "usage=",
        "created_at=",
        "total_duration=",
        "eval_count=",
    )
    cleaned: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and _TELEMETRY_PATTERN.match(stripped):
            continue
        if any(keyword in stripped for keyword in artefact_keywords):
            continue
        if stripped.lower().startswith(("assistant:", "system:", "thinking:")):
            continue
        cleaned.append(line.rstrip())

    # Collapse successive blanks to single blank lines.
    normalised: list[str] = []
    previous_blank = False
    for line in cleaned:
        if not line.strip():
            if not previous_blank:
                normalised.append("")
            previous_blank = True
        else:
            normalised.append(line)
            previous_blank = False

    return "\n".join(normalised).strip()


def unique_stripped(items: Iterable[str], limit: int) -> list[str]:
    """Trimmed, non-empty items in first-seen order, at most ``limit`` of them."""

    result: list[str] = []
    for item in items:
        cleaned = item.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
            if len(result) >= limit:
                break
    return result
