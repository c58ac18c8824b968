"""Command-line interface for briefbot."""
from __future__ import annotations

import argparse
import datetime as dt
import sys
from dataclasses import replace
from pathlib import Path

from .compose import compose_digest
from .config import AppConfig, load_config
from .email import generate_subject, get_theme, render_html_email
from .formats import available_formats, get_profile
from .log import get_logger, set_verbose
from .messaging import ChatPlatform, MessageStyle, MessagingClient, build_message
from .models import BannerImage, DigestInputs
from .prompt_corner import OllamaPromptCorner
from .render import render_markdown, render_team_brief
from .store import (
    chat_payload_filename,
    digest_filename,
    email_filename,
    read_entries,
    write_json,
    write_text,
)
from .utils import split_and_strip_csv


def _prepare_config(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    updated = cfg
    if args.format:
        updated = replace(updated, digest_format=args.format)
    if args.email_theme:
        updated = replace(updated, email_theme=args.email_theme)
    if args.send:
        updated = replace(updated, message_platform=args.send)
    if args.style:
        updated = replace(updated, message_style=args.style)
    if args.out_dir:
        updated = replace(updated, output_dir=args.out_dir)
    return updated


def _read_optional_text(path: str | None) -> str:
    if not path:
        return ""
    return Path(path).read_text(encoding="utf-8").strip()


def _build_inputs(args: argparse.Namespace) -> DigestInputs:
    entries = read_entries(Path(args.input))
    banner = None
    if args.banner_url:
        banner = BannerImage(
            image_url=args.banner_url,
            alt_text=args.banner_alt or "",
            themes=tuple(split_and_strip_csv(args.banner_themes)),
        )
    return DigestInputs(
        entries=entries,
        executive_summary=_read_optional_text(args.summary_file),
        my_take=args.my_take or "",
        alerts_summary=args.alerts_summary or "",
        overall_sentiment=args.sentiment or "",
        trends_summary=args.trends or "",
        research_suggestions=split_and_strip_csv(args.research),
        banner=banner,
        custom_title=args.title or "",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render article summaries as Markdown, HTML email or chat digests.")
    parser.add_argument("--input", required=True, help="JSON file with article entries.")
    parser.add_argument("--format", help=f"Digest format ({', '.join(available_formats())}).")
    parser.add_argument("--title", help="Custom digest title.")
    parser.add_argument("--summary-file", help="Text file holding the executive summary.")
    parser.add_argument("--my-take", help="Digest-level commentary.")
    parser.add_argument("--alerts-summary", help="Pre-computed alerts summary text.")
    parser.add_argument("--sentiment", help="Overall sentiment summary text.")
    parser.add_argument("--trends", help="Trend analysis text.")
    parser.add_argument("--research", help="Comma-separated research suggestions.")
    parser.add_argument("--banner-url", help="Banner image URL.")
    parser.add_argument("--banner-alt", help="Banner alt text.")
    parser.add_argument("--banner-themes", help="Comma-separated banner themes.")
    parser.add_argument("--email", action="store_true", help="Also render an HTML email.")
    parser.add_argument("--email-theme", help="Email theme (default, newsletter, minimal).")
    parser.add_argument("--team-brief", action="store_true", help="Also render a short team brief.")
    parser.add_argument("--send", choices=[platform.value for platform in ChatPlatform], help="Send a chat message.")
    parser.add_argument("--style", choices=[style.value for style in MessageStyle], help="Chat message style.")
    parser.add_argument("--dry-run", action="store_true", help="Write the chat payload to disk instead of posting it.")
    parser.add_argument("--prompt-corner", action="store_true", help="Generate the prompt corner with Ollama.")
    parser.add_argument("--out-dir", help="Directory for rendered files.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging (DEBUG level).")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not Path(args.input).is_file():
        parser.error(f"Input file not found: {args.input}")

    logger = get_logger("briefbot")
    if args.verbose:
        set_verbose()

    cfg = _prepare_config(load_config(), args)
    out_dir = Path(cfg.output_dir)
    today = dt.date.today()

    try:
        inputs = _build_inputs(args)
        logger.info("Loaded %s entries from %s", len(inputs.entries), args.input)

        profile = get_profile(cfg.digest_format)
        generator = None
        if args.prompt_corner:
            generator = OllamaPromptCorner(
                model=cfg.model,
                host=cfg.ollama_host,
                timeout=cfg.prompt_corner_timeout,
            )

        composed = compose_digest(
            inputs,
            profile,
            date=today,
            prompt_corner=generator,
            sort_groups_by_confidence=cfg.sort_groups_by_confidence,
        )
        markdown_path = write_text(out_dir / digest_filename(profile.name, today), render_markdown(composed))
        logger.info("Markdown digest written to %s", markdown_path)

        if args.email:
            theme = get_theme(cfg.email_theme)
            html = render_html_email(
                inputs,
                theme,
                date=today,
                sort_groups_by_confidence=cfg.sort_groups_by_confidence,
            )
            html_path = write_text(out_dir / email_filename(today), html)
            logger.info("Email digest written to %s (subject: %s)", html_path, generate_subject(theme, composed.title, today))

        if args.team_brief:
            brief_path = write_text(out_dir / f"team_brief_{today.isoformat()}.md", render_team_brief(inputs.entries, date=today))
            logger.info("Team brief written to %s", brief_path)

        if args.send:
            platform = ChatPlatform(cfg.message_platform)
            payload = build_message(platform, inputs.entries, composed.title, cfg.message_style)
            if args.dry_run:
                payload_path = write_json(out_dir / chat_payload_filename(platform.value, today), payload)
                logger.info("Dry run: %s payload written to %s", platform.value, payload_path)
            else:
                client = MessagingClient(
                    slack_webhook_url=cfg.slack_webhook_url,
                    discord_webhook_url=cfg.discord_webhook_url,
                    timeout=cfg.webhook_timeout,
                )
                client.send(platform, payload)
        return 0
    except Exception as exc:  # pragma: no cover - top-level safety
        logger.exception("Run failed: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
