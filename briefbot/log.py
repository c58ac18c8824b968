"""Logging setup shared by every briefbot module.

Handlers are attached to the root logger once, on the first call to
:func:`get_logger`. ``LOG_DIR`` picks the directory for the rotating log file
and ``LOG_LEVEL`` the console threshold.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "briefbot.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def _console_level() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(formatter: logging.Formatter) -> list[logging.Handler]:
    log_dir = Path(os.environ.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler()
    console.setLevel(_console_level())

    digest_log = RotatingFileHandler(
        log_dir / LOG_FILENAME,
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    digest_log.setLevel(logging.DEBUG)

    for handler in (console, digest_log):
        handler.setFormatter(formatter)
    return [console, digest_log]


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in _build_handlers(logging.Formatter(LOG_FORMAT)):
        root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_logging()
    return logging.getLogger(name)


def set_verbose() -> None:
    """Lower every root handler to DEBUG (used by ``--verbose``)."""

    _configure_logging()
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in root.handlers:
        handler.setLevel(logging.DEBUG)
