import datetime as dt
import json

import pytest

from briefbot.cli import main

ENV_KEYS = (
    "DIGEST_FORMAT",
    "EMAIL_THEME",
    "MESSAGE_PLATFORM",
    "MESSAGE_STYLE",
    "OUTPUT_DIR",
    "SORT_GROUPS_BY_CONFIDENCE",
)


@pytest.fixture()
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    entries = [
        {
            "title": "Kubernetes scheduler deep dive",
            "url": "https://example.com/k8s",
            "summary_text": "How pods get placed.",
            "topic_cluster": "Infrastructure",
            "topic_confidence": 0.9,
        },
        {"title": "Acme launches a new editor", "url": "https://example.com/editor"},
    ]
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    return tmp_path, path


def test_cli_dry_run_writes_every_output(workspace):
    root, entries_path = workspace
    out_dir = root / "out"
    summary = root / "summary.txt"
    summary.write_text("A quiet week.\n", encoding="utf-8")

    code = main(
        [
            "--input",
            str(entries_path),
            "--format",
            "brief",
            "--summary-file",
            str(summary),
            "--email",
            "--team-brief",
            "--send",
            "slack",
            "--style",
            "summary",
            "--dry-run",
            "--out-dir",
            str(out_dir),
        ]
    )

    assert code == 0
    today = dt.date.today().isoformat()
    markdown = (out_dir / f"digest_brief_{today}.md").read_text(encoding="utf-8")
    assert markdown.startswith("# Brief Digest — ")
    assert "A quiet week." in markdown
    assert (out_dir / f"digest_email_{today}.html").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
    assert (out_dir / f"team_brief_{today}.md").exists()
    payload = json.loads((out_dir / f"digest_slack_{today}.json").read_text(encoding="utf-8"))
    assert payload["attachments"][0]["text"] == "Summary of 2 articles:"


def test_cli_send_without_webhook_fails(workspace, monkeypatch):
    root, entries_path = workspace
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "")
    code = main(["--input", str(entries_path), "--send", "slack", "--out-dir", str(root / "out")])
    assert code == 1


def test_cli_rejects_missing_input(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 2
