"""Data models for briefbot."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:  # pragma: no cover - for type hints only
    from .formats import FormatProfile

DEFAULT_TOPIC = "General"


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


@dataclass(slots=True, frozen=True)
class ArticleEntry:
    """One article as it appears in a digest."""

    title: str
    url: str
    summary_text: str = ""
    my_take: str = ""
    topic_cluster: str = ""
    topic_confidence: float = 0.0
    sentiment_label: str = ""
    sentiment_emoji: str = ""
    alert_triggered: bool = False
    alert_conditions: tuple[str, ...] = ()
    content_type: str = ""
    content_icon: str = ""
    content_label: str = ""
    duration: int = 0
    channel: str = ""
    page_count: int = 0

    @property
    def cluster_name(self) -> str:
        return self.topic_cluster or DEFAULT_TOPIC

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArticleEntry":
        """Build an entry from a JSON object, defaulting anything missing."""

        conditions = data.get("alert_conditions") or []
        if isinstance(conditions, str):
            conditions = [conditions]
        return cls(
            title=_as_str(data.get("title")),
            url=_as_str(data.get("url")),
            summary_text=_as_str(data.get("summary_text")),
            my_take=_as_str(data.get("my_take")),
            topic_cluster=_as_str(data.get("topic_cluster")).strip(),
            topic_confidence=_as_float(data.get("topic_confidence")),
            sentiment_label=_as_str(data.get("sentiment_label")),
            sentiment_emoji=_as_str(data.get("sentiment_emoji")),
            alert_triggered=bool(data.get("alert_triggered", False)),
            alert_conditions=tuple(str(item) for item in conditions),
            content_type=_as_str(data.get("content_type")).lower(),
            content_icon=_as_str(data.get("content_icon")),
            content_label=_as_str(data.get("content_label")),
            duration=_as_int(data.get("duration")),
            channel=_as_str(data.get("channel")),
            page_count=_as_int(data.get("page_count")),
        )


@dataclass(slots=True)
class TopicGroup:
    topic_cluster: str
    articles: list[ArticleEntry]
    avg_confidence: float


@dataclass(slots=True, frozen=True)
class BannerImage:
    image_url: str
    alt_text: str = ""
    themes: tuple[str, ...] = ()


@dataclass(slots=True)
class DigestInputs:
    """Everything upstream hands over for a single render call."""

    entries: list[ArticleEntry]
    executive_summary: str = ""
    my_take: str = ""
    alerts_summary: str = ""
    overall_sentiment: str = ""
    trends_summary: str = ""
    research_suggestions: list[str] = field(default_factory=list)
    banner: BannerImage | None = None
    custom_title: str = ""


@dataclass(slots=True)
class ContentBlock:
    name: str
    text: str


@dataclass(slots=True)
class ComposedDigest:
    """Ordered, already-rendered sections of one digest."""

    title: str
    date: dt.date
    profile: "FormatProfile"
    blocks: list[ContentBlock] = field(default_factory=list)

    def names(self) -> list[str]:
        return [block.name for block in self.blocks]

    def has(self, name: str) -> bool:
        return any(block.name == name for block in self.blocks)

    def get(self, name: str) -> str | None:
        for block in self.blocks:
            if block.name == name:
                return block.text
        return None
