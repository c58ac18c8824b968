import datetime as dt
import logging

from briefbot.compose import (
    ACTIONS,
    ALERTS,
    ARTICLES,
    BANNER,
    CONCLUSION,
    EXECUTIVE_SUMMARY,
    INSIGHTS,
    INTRO,
    MY_TAKE,
    PROMPT_CORNER,
    REFERENCES,
    TITLE,
    WORD_COUNT,
    collect_action_items,
    compose_digest,
)
from briefbot.formats import FormatProfile, get_profile
from briefbot.models import ArticleEntry, BannerImage, DigestInputs

DATE = dt.date(2025, 3, 14)


class StubPromptCorner:
    def __init__(self, text: str = "Try asking about the scheduler.") -> None:
        self.text = text
        self.calls: list[str] = []

    def generate(self, summary_text: str) -> str:
        self.calls.append(summary_text)
        return self.text


class FailingPromptCorner:
    def generate(self, summary_text: str) -> str:
        raise TimeoutError("model took too long")


def _entries() -> list[ArticleEntry]:
    return [
        ArticleEntry(
            title="Kubernetes scheduler deep dive",
            url="https://example.com/k8s",
            summary_text="A long look at how the scheduler places pods across nodes in large clusters.",
            topic_cluster="Infrastructure",
            topic_confidence=0.9,
            sentiment_label="positive",
            sentiment_emoji="😊",
        ),
        ArticleEntry(
            title="Notes on gardening",
            url="https://example.com/garden",
            summary_text="Plant bulbs before the first frost.",
            topic_cluster="",
            topic_confidence=0.4,
            sentiment_label="neutral",
        ),
        ArticleEntry(
            title="Talk recording",
            url="https://example.com/talk",
            summary_text="Conference talk on caching.",
            topic_cluster="Infrastructure",
            topic_confidence=0.8,
            sentiment_label="positive",
            content_type="youtube",
            content_label="YouTube",
            duration=754,
            channel="InfraConf",
            alert_triggered=True,
            alert_conditions=("caching", "latency"),
        ),
    ]


def test_empty_entries_still_produce_title_intro_and_conclusion():
    composed = compose_digest(DigestInputs(entries=[]), get_profile("detailed"), date=DATE)
    assert composed.names() == [TITLE, INTRO, CONCLUSION]
    assert composed.get(TITLE) == "# Comprehensive Digest — 2025-03-14"


def test_custom_title_overrides_profile_title():
    inputs = DigestInputs(entries=[], custom_title="Friday Reading")
    composed = compose_digest(inputs, get_profile("standard"), date=DATE)
    assert composed.get(TITLE) == "# Friday Reading — 2025-03-14"
    assert composed.title == "Friday Reading"


def test_standard_block_order_and_word_count_after_title():
    inputs = DigestInputs(entries=_entries(), executive_summary="Busy week.", my_take="Worth a read.")
    composed = compose_digest(inputs, get_profile("standard"), date=DATE)
    assert composed.names() == [
        TITLE,
        WORD_COUNT,
        INTRO,
        EXECUTIVE_SUMMARY,
        ALERTS,
        INSIGHTS,
        ARTICLES,
        MY_TAKE,
        REFERENCES,
    ]
    word_count = composed.get(WORD_COUNT)
    assert word_count.startswith("*") and word_count.endswith(" read*")
    assert " words • " in word_count


def test_word_count_is_omitted_without_budget():
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("detailed"), date=DATE)
    assert not composed.has(WORD_COUNT)


def test_over_budget_digest_logs_warning(caplog):
    entries = [ArticleEntry(title=f"Article number {i}", url=f"https://example.com/{i}") for i in range(40)]
    inputs = DigestInputs(entries=entries)
    with caplog.at_level(logging.WARNING):
        composed = compose_digest(inputs, get_profile("brief"), date=DATE)
    assert composed.has(WORD_COUNT)
    assert "over its 200 word budget" in caplog.text


def test_executive_summary_truncated_under_budget_profiles():
    summary = " ".join(f"w{i}" for i in range(200))
    composed = compose_digest(DigestInputs(entries=[], executive_summary=summary), get_profile("brief"), date=DATE)
    text = composed.get(EXECUTIVE_SUMMARY)
    assert text.startswith("## Executive Summary\n\n")
    assert text.endswith("w149...")

    unlimited = compose_digest(DigestInputs(entries=[], executive_summary=summary), get_profile("detailed"), date=DATE)
    assert unlimited.get(EXECUTIVE_SUMMARY).endswith("w199")


def test_banner_block_uses_default_alt_text_and_themes():
    inputs = DigestInputs(
        entries=[],
        banner=BannerImage(image_url="https://img.example.com/b.png", themes=("AI", "Cloud")),
    )
    composed = compose_digest(inputs, get_profile("newsletter"), date=DATE)
    assert composed.get(BANNER) == (
        "![AI-generated banner](https://img.example.com/b.png)\n\n*Featured themes: AI, Cloud*"
    )

    standard = compose_digest(inputs, get_profile("standard"), date=DATE)
    assert not standard.has(BANNER)


def test_alerts_show_monitoring_message_for_flagged_entries():
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("standard"), date=DATE)
    alerts = composed.get(ALERTS)
    assert alerts.startswith("### ✅ Alert Monitoring")
    assert "1 article matched alert conditions" in alerts
    assert "- Talk recording (caching, latency)" in alerts


def test_explicit_alerts_summary_is_used_verbatim():
    inputs = DigestInputs(entries=[], alerts_summary="## 🚨 Alerts\n\nTwo outages reported.")
    composed = compose_digest(inputs, get_profile("standard"), date=DATE)
    assert composed.get(ALERTS) == "## 🚨 Alerts\n\nTwo outages reported."


def test_alerts_omitted_when_nothing_flagged():
    entries = [entry for entry in _entries() if not entry.alert_triggered]
    composed = compose_digest(DigestInputs(entries=entries), get_profile("standard"), date=DATE)
    assert not composed.has(ALERTS)


def test_insights_distribution_and_research_cap():
    suggestions = [f"query {i}" for i in range(10)] + ["query 1"]
    inputs = DigestInputs(
        entries=_entries(),
        overall_sentiment="Mostly upbeat.",
        trends_summary="Caching is back.",
        research_suggestions=suggestions,
    )
    composed = compose_digest(inputs, get_profile("standard"), date=DATE)
    insights = composed.get(INSIGHTS)
    assert insights.startswith("## 🧠 AI-Powered Insights")
    assert "Mostly upbeat." in insights
    assert "- 😊 Positive: 2 articles\n- 😐 Neutral: 1 articles" in insights
    assert "### 📈 Trend Analysis\n\nCaching is back." in insights
    assert "8. query 7" in insights
    assert "9. " not in insights


def test_insights_gated_by_profile():
    inputs = DigestInputs(entries=_entries(), trends_summary="Caching is back.")
    assert not compose_digest(inputs, get_profile("brief"), date=DATE).has(INSIGHTS)
    assert compose_digest(inputs, get_profile("newsletter"), date=DATE).has(INSIGHTS)


def test_scannable_skips_alerts_insights_and_actions():
    inputs = DigestInputs(entries=_entries(), trends_summary="Caching is back.", alerts_summary="Alert!")
    composed = compose_digest(inputs, get_profile("scannable"), date=DATE)
    assert not composed.has(ALERTS)
    assert not composed.has(INSIGHTS)
    assert not composed.has(ACTIONS)
    assert composed.has(ARTICLES)


def test_action_items_cap_and_fallbacks():
    specific = [
        ArticleEntry(title="New API for billing", url="u1"),
        ArticleEntry(title="Security review", url="u2"),
        ArticleEntry(title="Performance tips", url="u3"),
        ArticleEntry(title="Docker images", url="u4"),
    ]
    items = collect_action_items(specific)
    assert len(items) == 3
    assert items[0].startswith("Test the API changes")

    vague = [ArticleEntry(title="Notes on gardening", url="u5")]
    fallback = collect_action_items(vague)
    assert fallback == [
        "Research Notes further and share findings with your team",
        "Share the most useful article from this digest with your team",
    ]


def test_actions_block_requires_entries():
    assert not compose_digest(DigestInputs(entries=[]), get_profile("detailed"), date=DATE).has(ACTIONS)
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("detailed"), date=DATE)
    assert composed.get(ACTIONS).startswith("## ⚡ Action Items\n\n- ")


def test_grouped_articles_render_metadata_and_links():
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("detailed"), date=DATE)
    articles = composed.get(ARTICLES)

    assert articles.index("### 📑 Infrastructure") < articles.index("### 📑 General")
    assert "#### 😊 🔥 Kubernetes scheduler deep dive" in articles
    assert "*Topic relevance: 90%*" in articles
    assert "*YouTube • 12:34 • by InfraConf*" in articles
    assert "🚨 **Alert:** caching, latency" in articles
    assert "#### 😊 🎥 Talk recording" in articles
    assert "#### 😐 🔥 Notes on gardening" in articles
    assert "🔗 [Read more](https://example.com/garden)" in articles
    assert "Topic relevance: 40%" not in articles


def test_grouped_summary_uses_word_limit():
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("standard"), date=DATE)
    articles = composed.get(ARTICLES)
    assert "A long look at how the scheduler places pods across nodes in large clusters." in articles

    entry = ArticleEntry(title="Wordy", url="u", summary_text=" ".join(["word"] * 40))
    composed = compose_digest(DigestInputs(entries=[entry]), get_profile("standard"), date=DATE)
    assert " ".join(["word"] * 25) + "..." in composed.get(ARTICLES)


def test_flat_articles_use_footnotes():
    flat = FormatProfile(
        name="flat",
        title="Flat Digest",
        include_individual_articles=True,
    )
    composed = compose_digest(DigestInputs(entries=_entries()), flat, date=DATE)
    articles = composed.get(ARTICLES)
    assert "### 1. 😊 🔥 Kubernetes scheduler deep dive" in articles
    assert "### 2. 😐 🔥 Notes on gardening" in articles
    assert "### 3. 😊 🎥 Talk recording" in articles
    assert "[^1]: https://example.com/k8s" in articles
    assert "[^3]: https://example.com/talk" in articles
    assert "Read more" not in articles


def test_scannable_category_view():
    entries = [
        ArticleEntry(title="Outage at Acme", url="u1", my_take="🔥 Breaking & Hot | Big incident"),
        ArticleEntry(title="Editor 2.0", url="u2", my_take="🚀 Product Updates | Shiny"),
        ArticleEntry(title="Odd one", url="u3", my_take="Random thought"),
        ArticleEntry(title="Another outage", url="u4", my_take="🔥 Breaking & Hot | Again"),
    ]
    composed = compose_digest(DigestInputs(entries=entries), get_profile("scannable"), date=DATE)
    articles = composed.get(ARTICLES)

    assert articles.index("### 🔥 Breaking & Hot") < articles.index("### 🚀 Product Updates")
    assert articles.index("### 🚀 Product Updates") < articles.index("### Additional Items")
    assert "**1. 🔥 [Outage at Acme](u1)**" in articles
    assert "**2. 🔥 [Another outage](u4)**" in articles
    assert "**4. 🔥 [Odd one](u3)**" in articles
    assert "→ Big incident" in articles


def test_scannable_flat_view_uses_first_sentence():
    summary = "First sentence here. " + " ".join(["more"] * 30)
    entries = [ArticleEntry(title="Plain", url="u1", summary_text=summary)]
    composed = compose_digest(DigestInputs(entries=entries), get_profile("scannable"), date=DATE)
    articles = composed.get(ARTICLES)
    assert "### " not in articles
    assert "**1. 🔥 [Plain](u1)**\nFirst sentence here." in articles


def test_prompt_corner_called_with_summary():
    generator = StubPromptCorner()
    inputs = DigestInputs(entries=_entries(), executive_summary="Busy week.")
    composed = compose_digest(inputs, get_profile("newsletter"), date=DATE, prompt_corner=generator)
    assert generator.calls == ["Busy week."]
    assert composed.get(PROMPT_CORNER) == "## 🎯 Prompt Corner\n\nTry asking about the scheduler."


def test_prompt_corner_failure_omits_block(caplog):
    inputs = DigestInputs(entries=_entries(), executive_summary="Busy week.")
    with caplog.at_level(logging.WARNING):
        composed = compose_digest(inputs, get_profile("newsletter"), date=DATE, prompt_corner=FailingPromptCorner())
    assert not composed.has(PROMPT_CORNER)
    assert composed.has(CONCLUSION)
    assert "Prompt corner generation failed" in caplog.text


def test_prompt_corner_skipped_without_summary_or_flag():
    generator = StubPromptCorner()
    compose_digest(DigestInputs(entries=_entries()), get_profile("newsletter"), date=DATE, prompt_corner=generator)
    compose_digest(
        DigestInputs(entries=_entries(), executive_summary="Busy week."),
        get_profile("standard"),
        date=DATE,
        prompt_corner=generator,
    )
    assert generator.calls == []


def test_references_list_every_entry_in_input_order():
    composed = compose_digest(DigestInputs(entries=_entries()), get_profile("brief"), date=DATE)
    assert composed.get(REFERENCES) == (
        "## References\n\n"
        "[1] https://example.com/k8s\n    *Kubernetes scheduler deep dive*\n\n"
        "[2] https://example.com/garden\n    *Notes on gardening*\n\n"
        "[3] https://example.com/talk\n    *Talk recording*"
    )


def test_sort_flag_controls_group_order():
    k8s, garden, talk = _entries()
    entries = [garden, k8s, talk]
    sorted_view = compose_digest(DigestInputs(entries=entries), get_profile("detailed"), date=DATE)
    unsorted_view = compose_digest(
        DigestInputs(entries=entries),
        get_profile("detailed"),
        date=DATE,
        sort_groups_by_confidence=False,
    )
    sorted_articles = sorted_view.get(ARTICLES)
    unsorted_articles = unsorted_view.get(ARTICLES)
    assert sorted_articles.index("### 📑 Infrastructure") < sorted_articles.index("### 📑 General")
    assert unsorted_articles.index("### 📑 General") < unsorted_articles.index("### 📑 Infrastructure")


def test_key_insight_keeps_unspaced_pipes():
    entry = ArticleEntry(title="Shell tricks", url="https://example.com/shell", my_take="compare cat|grep usage")
    composed = compose_digest(DigestInputs(entries=[entry]), get_profile("standard"), date=DATE)
    assert "**Key Insight:** compare cat|grep usage" in composed.get(ARTICLES)
