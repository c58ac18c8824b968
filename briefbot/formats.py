"""Named digest formats and their editorial budgets."""
from __future__ import annotations

from dataclasses import dataclass

from .log import get_logger

LOGGER = get_logger(__name__)

DEFAULT_FORMAT = "standard"
DEFAULT_SEPARATOR = "\n\n---\n\n"


@dataclass(slots=True, frozen=True)
class FormatProfile:
    """Inclusion switches and length budgets for one digest style.

    ``max_summary_words`` and ``max_digest_words`` use 0 for "unlimited".
    """

    name: str
    title: str
    include_summaries: bool = True
    include_key_insights: bool = False
    include_action_items: bool = False
    include_source_links: bool = True
    include_prompt_corner: bool = False
    include_individual_articles: bool = False
    include_topic_clustering: bool = False
    include_banner: bool = False
    max_summary_words: int = 0
    max_digest_words: int = 0
    intro_text: str = ""
    conclusion_text: str = ""
    section_separator: str = DEFAULT_SEPARATOR

    @property
    def enforces_digest_budget(self) -> bool:
        return self.max_digest_words > 0

    @property
    def is_scannable(self) -> bool:
        return self.name == "scannable"


PROFILES: dict[str, FormatProfile] = {
    "brief": FormatProfile(
        name="brief",
        title="Brief Digest",
        max_summary_words=25,
        max_digest_words=200,
        intro_text="Quick highlights from today's reading:",
    ),
    "standard": FormatProfile(
        name="standard",
        title="Daily Digest",
        include_key_insights=True,
        include_individual_articles=True,
        include_topic_clustering=True,
        max_summary_words=25,
        max_digest_words=400,
        intro_text="Here's what's worth knowing from today's articles:",
    ),
    "detailed": FormatProfile(
        name="detailed",
        title="Comprehensive Digest",
        include_key_insights=True,
        include_action_items=True,
        include_prompt_corner=True,
        include_individual_articles=True,
        include_topic_clustering=True,
        include_banner=True,
        intro_text="In-depth analysis of today's key articles:",
        conclusion_text="These insights provide a comprehensive view of current developments in the field.",
    ),
    "newsletter": FormatProfile(
        name="newsletter",
        title="Weekly Newsletter",
        include_key_insights=True,
        include_action_items=True,
        include_prompt_corner=True,
        include_topic_clustering=True,
        include_banner=True,
        max_summary_words=50,
        max_digest_words=800,
        intro_text="Welcome to this week's curated selection of insights! Here's what caught our attention:",
        conclusion_text="Thank you for reading! Forward this to colleagues who might find it valuable.",
        section_separator="\n\n💡 **Key Insight**\n\n",
    ),
    "scannable": FormatProfile(
        name="scannable",
        title="Scannable Digest",
        include_individual_articles=True,
        max_summary_words=25,
        max_digest_words=400,
        intro_text="Today's reading, sorted so you can scan it in a couple of minutes:",
        section_separator="\n\n",
    ),
    "email": FormatProfile(
        name="email",
        title="Email Digest",
        include_key_insights=True,
        include_action_items=True,
        include_topic_clustering=True,
        include_banner=True,
        max_summary_words=50,
        max_digest_words=400,
        intro_text="Here's your personalized digest with today's most important insights:",
        conclusion_text="Stay informed and keep exploring!",
    ),
}


def available_formats() -> list[str]:
    return list(PROFILES)


def get_profile(name: str | None) -> FormatProfile:
    """Look up a profile by name, falling back to ``standard``."""

    key = (name or "").strip().lower()
    profile = PROFILES.get(key)
    if profile is None:
        LOGGER.warning("Unknown digest format '%s', falling back to '%s'", name, DEFAULT_FORMAT)
        return PROFILES[DEFAULT_FORMAT]
    return profile
