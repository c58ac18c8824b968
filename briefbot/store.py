"""Persistence utilities for briefbot."""
from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any

from .models import ArticleEntry


def write_text(path: Path, text: str) -> Path:
    """Write text to a file, ensuring parent directories exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, payload: dict) -> Path:
    """Write structured JSON payload to disk."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def digest_filename(format_name: str, date: dt.date) -> str:
    return f"digest_{format_name.lower()}_{date.isoformat()}.md"


def email_filename(date: dt.date) -> str:
    return f"digest_email_{date.isoformat()}.html"


def chat_payload_filename(platform: str, date: dt.date) -> str:
    return f"digest_{platform.lower()}_{date.isoformat()}.json"


def read_entries(path: Path) -> list[ArticleEntry]:
    """Load article entries from a JSON list or an ``{"entries": [...]}`` object."""

    data: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of entries")
    return [ArticleEntry.from_dict(item) for item in data if isinstance(item, dict)]
