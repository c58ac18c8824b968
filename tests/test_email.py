import datetime as dt
import logging

from briefbot.email import THEMES, email_css, format_email_date, generate_subject, get_theme, render_html_email
from briefbot.models import ArticleEntry, BannerImage, DigestInputs

DATE = dt.date(2025, 3, 14)


def _inputs() -> DigestInputs:
    return DigestInputs(
        entries=[
            ArticleEntry(
                title="Rust <3 WebAssembly",
                url="https://example.com/rust?a=1&b=2",
                summary_text="Compiling to wasm & shipping it.",
                topic_cluster="Languages",
                topic_confidence=0.9,
                my_take="Worth trying on the edge worker.",
                alert_triggered=True,
            ),
            ArticleEntry(
                title="Quarterly hiring notes",
                url="https://example.com/hiring",
                summary_text=" ".join(["word"] * 80),
            ),
        ],
        executive_summary="A busy week for <compilers>.",
        overall_sentiment="Mostly positive.",
        trends_summary="More wasm.",
        research_suggestions=["wasm runtimes", "wasm runtimes", "edge caching"],
        banner=BannerImage(image_url="https://img.example.com/banner.png"),
    )


def test_get_theme_falls_back_to_default(caplog):
    assert get_theme("Newsletter").name == "newsletter"
    with caplog.at_level(logging.WARNING):
        theme = get_theme("neon")
    assert theme is THEMES["default"]
    assert "Unknown email theme" in caplog.text


def test_subject_and_date_formatting():
    assert format_email_date(DATE) == "March 14, 2025"
    assert generate_subject(THEMES["default"], "Digest", DATE) == "Your Briefly Digest - March 14, 2025"
    assert generate_subject(THEMES["minimal"], "Digest", "today") == "Digest - today"


def test_email_css_uses_theme_palette():
    css = email_css(THEMES["newsletter"])
    assert "background-color:#059669" in css
    assert "max-width:700px" in css
    assert "{" in css and "{{" not in css


def test_render_html_email_default_theme_structure():
    html = render_html_email(_inputs(), THEMES["default"], date=DATE)

    assert html.startswith("<!DOCTYPE html>")
    assert html.rstrip().endswith("</html>")
    assert "<h1>Email Digest</h1>" in html
    assert "<p class=\"date\">March 14, 2025</p>" in html
    assert "<img class=\"banner\" src=\"https://img.example.com/banner.png\" alt=\"AI-generated banner\" />" in html
    assert "📋 Executive Summary" in html
    assert "A busy week for &lt;compilers&gt;." in html
    assert "🧠 AI-Powered Insights" in html
    assert html.count("<li>wasm runtimes</li>") == 1
    assert "📑 Languages" in html
    assert "📑 General" in html
    assert "🎯 Conclusion" in html
    assert "Generated by Briefly on March 14, 2025" in html


def test_render_html_email_escapes_article_fields():
    html = render_html_email(_inputs(), THEMES["default"], date=DATE)
    assert "Rust &lt;3 WebAssembly" in html
    assert "Rust <3" not in html
    assert "href=\"https://example.com/rust?a=1&amp;b=2\"" in html
    assert "Compiling to wasm &amp; shipping it." in html
    assert "💡 Key Insight:" in html
    assert "🚨 Alert Triggered" in html


def test_render_html_email_truncates_long_summaries():
    html = render_html_email(_inputs(), THEMES["default"], date=DATE)
    assert " ".join(["word"] * 50) + "..." in html
    assert " ".join(["word"] * 51) not in html


def test_minimal_theme_hides_insights_and_topic_groups():
    html = render_html_email(_inputs(), THEMES["minimal"], date=DATE)
    assert "AI-Powered Insights" not in html
    assert "topic-group" not in html.split("</style>")[-1]
    assert "📄 Articles" in html


def test_custom_title_is_used_in_header():
    inputs = _inputs()
    inputs.custom_title = "Team Digest"
    html = render_html_email(inputs, THEMES["default"], date=DATE)
    assert "<title>Team Digest</title>" in html
    assert "<h1>Team Digest</h1>" in html


def test_email_research_suggestions_are_capped():
    inputs = _inputs()
    inputs.research_suggestions = [f"query {i}" for i in range(12)]
    html = render_html_email(inputs, THEMES["default"], date=DATE)
    assert html.count("<li>query") == 8
    assert "<li>query 7</li>" in html
    assert "<li>query 8</li>" not in html
