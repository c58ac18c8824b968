"""Prompt corner generation using Ollama chat."""
from __future__ import annotations

import re
from typing import Any

from ollama import Client

from .log import get_logger
from .prompts import PROMPT_CORNER_SYSTEM_PROMPT, PROMPT_CORNER_TEMPLATE
from .utils import strip_telemetry_lines

LOGGER = get_logger(__name__)

DEFAULT_MODEL = "qwen3:4b"
DEFAULT_TIMEOUT = 30

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_LEADING_HEADING = re.compile(r"^#+\s*(?:🎯\s*)?prompt corner\s*\n+", re.IGNORECASE)


class PromptCornerError(RuntimeError):
    """Raised when the model produced nothing usable."""


def _extract_message_content(response: Any) -> str:
    """Safely extract assistant content from an Ollama chat response."""

    if hasattr(response, "message"):
        message = getattr(response, "message")
        if message is not None:
            content = getattr(message, "content", None)
            if content:
                return content
            if isinstance(message, dict):
                content = message.get("content")
                if content:
                    return content
    if isinstance(response, dict):
        message = response.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if content:
                return content
        content = response.get("content")
        if content:
            return content
    return ""


def clean_prompt_corner(text: str) -> str:
    """Drop reasoning traces, telemetry noise and a duplicated section heading."""

    cleaned = _THINK_BLOCK.sub("", text or "")
    cleaned = strip_telemetry_lines(cleaned)
    cleaned = _LEADING_HEADING.sub("", cleaned)
    return cleaned.strip()


class OllamaPromptCorner:
    """Generate the prompt corner from an executive summary.

    The client owns the request timeout; any failure propagates so the
    composer can decide to drop the section.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        host: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.client = client or Client(host=host, timeout=timeout)

    def generate(self, summary_text: str) -> str:
        messages = [
            {"role": "system", "content": PROMPT_CORNER_SYSTEM_PROMPT},
            {"role": "user", "content": PROMPT_CORNER_TEMPLATE.format(digest=summary_text.strip())},
        ]
        LOGGER.debug("Requesting prompt corner from %s", self.model)
        response = self.client.chat(model=self.model, messages=messages)
        content = clean_prompt_corner(_extract_message_content(response))
        if not content:
            raise PromptCornerError("empty prompt corner response")
        return content
