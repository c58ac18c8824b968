"""Configuration loading for briefbot."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, MutableMapping

from dotenv import load_dotenv

from .email import THEMES
from .formats import PROFILES
from .log import get_logger
from .messaging import ChatPlatform, MessageStyle

LOGGER = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class AppConfig:
    """Runtime configuration for the application."""

    digest_format: str
    email_theme: str
    message_platform: str
    message_style: str
    slack_webhook_url: str
    discord_webhook_url: str
    webhook_timeout: int
    model: str
    ollama_host: str | None
    prompt_corner_timeout: int
    output_dir: str
    sort_groups_by_confidence: bool


def _parse_int(env: Mapping[str, str], key: str, default: int, minimum: int = 1, maximum: int | None = None) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Invalid integer for %s, using default %s", key, default)
        return default
    if value < minimum:
        LOGGER.warning("%s below minimum (%s), clamping", key, minimum)
        value = minimum
    if maximum is not None and value > maximum:
        LOGGER.warning("%s above maximum (%s), clamping", key, maximum)
        value = maximum
    return value


def _parse_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    LOGGER.warning("Invalid boolean for %s, using default %s", key, default)
    return default


def _normalise_choice(key: str, value: str, choices: set[str], default: str) -> str:
    lowered = value.lower().strip()
    if lowered not in choices:
        LOGGER.warning("Unsupported %s '%s', falling back to '%s'", key, value, default)
        return default
    return lowered


def load_config(env: MutableMapping[str, str] | Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from environment variables.

    Parameters
    ----------
    env:
        Environment mapping to read configuration from. Defaults to ``os.environ``
        after loading any ``.env`` file.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    platforms = {platform.value for platform in ChatPlatform}
    styles = {style.value for style in MessageStyle}

    config = AppConfig(
        digest_format=_normalise_choice("DIGEST_FORMAT", env.get("DIGEST_FORMAT", "standard"), set(PROFILES), "standard"),
        email_theme=_normalise_choice("EMAIL_THEME", env.get("EMAIL_THEME", "default"), set(THEMES), "default"),
        message_platform=_normalise_choice("MESSAGE_PLATFORM", env.get("MESSAGE_PLATFORM", "slack"), platforms, "slack"),
        message_style=_normalise_choice("MESSAGE_STYLE", env.get("MESSAGE_STYLE", "bullets"), styles, "bullets"),
        slack_webhook_url=env.get("SLACK_WEBHOOK_URL", ""),
        discord_webhook_url=env.get("DISCORD_WEBHOOK_URL", ""),
        webhook_timeout=_parse_int(env, "WEBHOOK_TIMEOUT", default=30, minimum=1, maximum=300),
        model=env.get("MODEL", "qwen3:4b"),
        ollama_host=env.get("OLLAMA_HOST") or None,
        prompt_corner_timeout=_parse_int(env, "PROMPT_CORNER_TIMEOUT", default=30, minimum=1, maximum=600),
        output_dir=env.get("OUTPUT_DIR", "digests"),
        sort_groups_by_confidence=_parse_bool(env, "SORT_GROUPS_BY_CONFIDENCE", default=True),
    )

    LOGGER.debug("Loaded configuration: %s", config)
    return config
