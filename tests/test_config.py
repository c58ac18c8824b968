import logging

from briefbot.config import load_config


def test_load_config_defaults():
    cfg = load_config({})
    assert cfg.digest_format == "standard"
    assert cfg.email_theme == "default"
    assert cfg.message_platform == "slack"
    assert cfg.message_style == "bullets"
    assert cfg.slack_webhook_url == ""
    assert cfg.webhook_timeout == 30
    assert cfg.model == "qwen3:4b"
    assert cfg.ollama_host is None
    assert cfg.output_dir == "digests"
    assert cfg.sort_groups_by_confidence is True


def test_load_config_reads_values():
    cfg = load_config(
        {
            "DIGEST_FORMAT": "Newsletter",
            "EMAIL_THEME": "minimal",
            "MESSAGE_PLATFORM": "discord",
            "MESSAGE_STYLE": "summary",
            "DISCORD_WEBHOOK_URL": "https://discord.com/api/webhooks/1/a",
            "WEBHOOK_TIMEOUT": "10",
            "OLLAMA_HOST": "http://localhost:11434",
            "SORT_GROUPS_BY_CONFIDENCE": "no",
        }
    )
    assert cfg.digest_format == "newsletter"
    assert cfg.email_theme == "minimal"
    assert cfg.message_platform == "discord"
    assert cfg.message_style == "summary"
    assert cfg.webhook_timeout == 10
    assert cfg.ollama_host == "http://localhost:11434"
    assert cfg.sort_groups_by_confidence is False


def test_invalid_values_fall_back_with_warnings(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = load_config(
            {
                "DIGEST_FORMAT": "haiku",
                "MESSAGE_PLATFORM": "teams",
                "WEBHOOK_TIMEOUT": "soon",
                "PROMPT_CORNER_TIMEOUT": "0",
                "SORT_GROUPS_BY_CONFIDENCE": "maybe",
            }
        )
    assert cfg.digest_format == "standard"
    assert cfg.message_platform == "slack"
    assert cfg.webhook_timeout == 30
    assert cfg.prompt_corner_timeout == 1
    assert cfg.sort_groups_by_confidence is True
    assert "Unsupported DIGEST_FORMAT 'haiku'" in caplog.text
    assert "Invalid integer for WEBHOOK_TIMEOUT" in caplog.text
    assert "Invalid boolean for SORT_GROUPS_BY_CONFIDENCE" in caplog.text
