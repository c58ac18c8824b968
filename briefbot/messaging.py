"""Slack and Discord payload builders plus a small webhook client."""
from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Sequence

import requests

from .log import get_logger
from .models import ArticleEntry
from .utils import truncate_chars

LOGGER = get_logger(__name__)

BOT_USERNAME = "Briefly"
SLACK_ICON = ":newspaper:"
SLACK_HIGHLIGHTS_ICON = ":dart:"
BRAND_COLOR = 0x2563EB
HIGHLIGHTS_COLOR = 0x10B981
DEFAULT_TIMEOUT = 30

MAX_BULLET_ITEMS = 10
MAX_SUMMARY_FIELDS = 5
MAX_HIGHLIGHTS = 5
BULLET_SUMMARY_CHARS = 100
FIELD_SUMMARY_CHARS = 150

SLACK_HOST = "hooks.slack.com"
DISCORD_HOST = "discord.com/api/webhooks"


class ChatPlatform(str, Enum):
    SLACK = "slack"
    DISCORD = "discord"


class MessageStyle(str, Enum):
    BULLETS = "bullets"
    SUMMARY = "summary"
    HIGHLIGHTS = "highlights"


class MessagingError(Exception):
    """Base exception for chat delivery problems."""


class WebhookConfigError(MessagingError):
    """Raised before any request when a platform or URL is unusable."""


class WebhookDeliveryError(MessagingError):
    """Raised when a webhook POST fails or returns an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


def parse_platform(value: ChatPlatform | str) -> ChatPlatform:
    try:
        return ChatPlatform(str(getattr(value, "value", value)).strip().lower())
    except ValueError as exc:
        raise WebhookConfigError(f"unknown platform: {value}") from exc


def parse_style(value: MessageStyle | str | None) -> MessageStyle:
    """Resolve a style name; anything unrecognised becomes ``bullets``."""

    if isinstance(value, MessageStyle):
        return value
    try:
        return MessageStyle((value or "").strip().lower())
    except ValueError:
        LOGGER.warning("Unknown message style '%s', falling back to bullets", value)
        return MessageStyle.BULLETS


def _now(now: dt.datetime | None) -> dt.datetime:
    return now or dt.datetime.now(dt.timezone.utc)


def _short_time(moment: dt.datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{moment:%b} {moment.day}, {hour}:{moment:%M %p}"


def _prefixed_title(entry: ArticleEntry, include_sentiment: bool) -> str:
    if include_sentiment and entry.sentiment_emoji:
        return f"{entry.sentiment_emoji} {entry.title}"
    return entry.title


def _slack_bullets(entries: Sequence[ArticleEntry], title: str, include_sentiment: bool, now: dt.datetime) -> dict[str, Any]:
    bullets = []
    for entry in entries[:MAX_BULLET_ITEMS]:
        prefix = f"{entry.sentiment_emoji} " if include_sentiment and entry.sentiment_emoji else ""
        summary = truncate_chars(entry.summary_text, BULLET_SUMMARY_CHARS)
        bullets.append(f"• {prefix}*{entry.title}*\n{summary}\n\n")

    footer = f"📱 Generated by Briefly • {len(entries)} articles • {_short_time(now)}"
    return {
        "blocks": [
            {"type": "header", "text": {"type": "plain_text", "text": title}},
            {"type": "divider"},
            {"type": "section", "text": {"type": "mrkdwn", "text": "".join(bullets)}},
            {"type": "context", "elements": [{"type": "mrkdwn", "text": footer}]},
        ],
        "username": BOT_USERNAME,
        "icon_emoji": SLACK_ICON,
    }


def _slack_summary(entries: Sequence[ArticleEntry], title: str, include_sentiment: bool, now: dt.datetime) -> dict[str, Any]:
    fields = [
        {
            "title": _prefixed_title(entry, include_sentiment),
            "value": truncate_chars(entry.summary_text, FIELD_SUMMARY_CHARS),
            "short": False,
        }
        for entry in entries[:MAX_SUMMARY_FIELDS]
    ]
    return {
        "text": f"📰 {title}",
        "username": BOT_USERNAME,
        "icon_emoji": SLACK_ICON,
        "attachments": [
            {
                "color": f"#{BRAND_COLOR:06x}",
                "title": title,
                "text": f"Summary of {len(entries)} articles:",
                "fields": fields,
                "footer": "Generated by Briefly",
                "ts": int(now.timestamp()),
            }
        ],
    }


def _slack_highlights(entries: Sequence[ArticleEntry], title: str, include_sentiment: bool) -> dict[str, Any]:
    highlights = [_prefixed_title(entry, include_sentiment) for entry in entries[:MAX_HIGHLIGHTS]]
    return {
        "text": f"🎯 *{title}*\n\nKey highlights:\n• " + "\n• ".join(highlights),
        "username": BOT_USERNAME,
        "icon_emoji": SLACK_HIGHLIGHTS_ICON,
    }


def build_slack_message(
    entries: Sequence[ArticleEntry],
    title: str,
    style: MessageStyle | str = MessageStyle.BULLETS,
    *,
    include_sentiment: bool = True,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    """Build a Slack webhook payload in the requested style."""

    resolved = parse_style(style)
    moment = _now(now)
    if resolved is MessageStyle.SUMMARY:
        return _slack_summary(entries, title, include_sentiment, moment)
    if resolved is MessageStyle.HIGHLIGHTS:
        return _slack_highlights(entries, title, include_sentiment)
    return _slack_bullets(entries, title, include_sentiment, moment)


def _discord_embed(title: str, description: str, color: int, footer: str, now: dt.datetime) -> dict[str, Any]:
    return {
        "title": title,
        "description": description,
        "color": color,
        "footer": {"text": footer},
        "timestamp": now.isoformat(timespec="seconds"),
    }


def build_discord_message(
    entries: Sequence[ArticleEntry],
    title: str,
    style: MessageStyle | str = MessageStyle.BULLETS,
    *,
    include_sentiment: bool = True,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    """Build a Discord webhook payload in the requested style."""

    resolved = parse_style(style)
    moment = _now(now)

    if resolved is MessageStyle.SUMMARY:
        embed = _discord_embed(title, f"Summary of {len(entries)} articles", BRAND_COLOR, "Generated by Briefly", moment)
        embed["fields"] = [
            {
                "name": _prefixed_title(entry, include_sentiment),
                "value": truncate_chars(entry.summary_text, FIELD_SUMMARY_CHARS),
                "inline": False,
            }
            for entry in entries[:MAX_SUMMARY_FIELDS]
        ]
    elif resolved is MessageStyle.HIGHLIGHTS:
        lines = "".join(f"• {_prefixed_title(entry, include_sentiment)}\n" for entry in entries[:MAX_HIGHLIGHTS])
        embed = _discord_embed(title, "🎯 **Key highlights:**\n\n" + lines, HIGHLIGHTS_COLOR, "Generated by Briefly", moment)
    else:
        bullets = []
        for entry in entries[:MAX_BULLET_ITEMS]:
            prefix = f"{entry.sentiment_emoji} " if include_sentiment and entry.sentiment_emoji else ""
            summary = truncate_chars(entry.summary_text, BULLET_SUMMARY_CHARS)
            bullets.append(f"• {prefix}**{entry.title}**\n{summary}\n\n")
        footer = f"Generated by Briefly • {len(entries)} articles"
        embed = _discord_embed(title, "".join(bullets), BRAND_COLOR, footer, moment)

    return {"username": BOT_USERNAME, "embeds": [embed]}


def build_message(
    platform: ChatPlatform | str,
    entries: Sequence[ArticleEntry],
    title: str,
    style: MessageStyle | str = MessageStyle.BULLETS,
    *,
    include_sentiment: bool = True,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    resolved = parse_platform(platform)
    if resolved is ChatPlatform.DISCORD:
        return build_discord_message(entries, title, style, include_sentiment=include_sentiment, now=now)
    return build_slack_message(entries, title, style, include_sentiment=include_sentiment, now=now)


def validate_webhook_url(platform: ChatPlatform | str, url: str | None) -> None:
    """Raise :class:`WebhookConfigError` if ``url`` cannot serve ``platform``."""

    resolved = parse_platform(platform)
    if not url:
        raise WebhookConfigError(f"{resolved.value} webhook URL cannot be empty")
    if resolved is ChatPlatform.SLACK and SLACK_HOST not in url:
        raise WebhookConfigError("invalid Slack webhook URL format")
    if resolved is ChatPlatform.DISCORD and DISCORD_HOST not in url:
        raise WebhookConfigError("invalid Discord webhook URL format")


class MessagingClient:
    """POST chat payloads to configured Slack or Discord webhooks.

    There is no retry; one failed request surfaces as one
    :class:`WebhookDeliveryError`.
    """

    SUCCESS_CODES = {
        ChatPlatform.SLACK: frozenset({200}),
        ChatPlatform.DISCORD: frozenset({200, 204}),
    }

    def __init__(
        self,
        slack_webhook_url: str | None = None,
        discord_webhook_url: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.slack_webhook_url = slack_webhook_url or ""
        self.discord_webhook_url = discord_webhook_url or ""
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Content-Type"] = "application/json"

    def webhook_url(self, platform: ChatPlatform | str) -> str:
        resolved = parse_platform(platform)
        if resolved is ChatPlatform.DISCORD:
            return self.discord_webhook_url
        return self.slack_webhook_url

    def send(self, platform: ChatPlatform | str, payload: dict[str, Any]) -> None:
        resolved = parse_platform(platform)
        url = self.webhook_url(resolved)
        validate_webhook_url(resolved, url)

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WebhookDeliveryError(f"failed to send {resolved.value} message: {exc}") from exc

        if response.status_code not in self.SUCCESS_CODES[resolved]:
            raise WebhookDeliveryError(
                f"{resolved.value} webhook returned status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        LOGGER.info("Delivered %s message (%s)", resolved.value, response.status_code)

    def send_digest(
        self,
        platform: ChatPlatform | str,
        entries: Sequence[ArticleEntry],
        title: str,
        style: MessageStyle | str = MessageStyle.BULLETS,
    ) -> dict[str, Any]:
        payload = build_message(platform, entries, title, style)
        self.send(platform, payload)
        return payload
