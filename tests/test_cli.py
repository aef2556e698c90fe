"""End-to-end CLI runs against a temp database with mock analysis."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from speechcoach.cli.app import app

runner = CliRunner()


def _json_lines(stdout: str) -> list[dict]:
    return [json.loads(line) for line in stdout.splitlines() if line.startswith("{")]


@pytest.fixture(autouse=True)
def _mock_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("SC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("speechcoach.core.config.CONFIG_FILE_PATH", tmp_path / "config.json")
    monkeypatch.setenv("SC_MOCK_ANALYSIS", "true")


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert _json_lines(result.stdout)[-1]["package"] == "speechcoach"


def test_add_analyze_result_flow(tmp_path: Path, video_file: Path) -> None:
    db = str(tmp_path / "cli.db")

    added = runner.invoke(app, ["add", str(video_file), "--prompt", "Intro", "--db", db])
    assert added.exit_code == 0, added.output
    recording_id = _json_lines(added.stdout)[-1]["recording_id"]

    analyzed = runner.invoke(app, ["analyze", recording_id, "--mode", "pitch", "--db", db])
    assert analyzed.exit_code == 0, analyzed.output
    summary = _json_lines(analyzed.stdout)[-1]
    assert summary["status"] == "completed"
    assert summary["source"] == "mock"
    assert summary["mode"] == "pitch"

    status = runner.invoke(app, ["status", recording_id, "--db", db])
    assert _json_lines(status.stdout)[-1]["status"] == "completed"

    listed = runner.invoke(app, ["list", "--db", db])
    assert _json_lines(listed.stdout)[-1]["total"] == 1

    pending = runner.invoke(app, ["list", "--status", "pending", "--db", db])
    assert _json_lines(pending.stdout)[-1]["total"] == 0
    completed = runner.invoke(app, ["list", "--status", "completed", "--db", db])
    assert _json_lines(completed.stdout)[-1]["best_overall_score"] == 6.5

    info = runner.invoke(app, ["info", recording_id, "--db", db])
    assert info.exit_code == 0
    assert '"prompt_text": "Intro"' in info.stdout
    assert '"overall_score": 6.5' in info.stdout

    shown = runner.invoke(app, ["result", recording_id, "--db", db])
    assert shown.exit_code == 0
    assert '"source": "mock"' in shown.stdout


def test_unknown_recording_exits_nonzero(tmp_path: Path) -> None:
    result = runner.invoke(app, ["info", "recording_missing", "--db", str(tmp_path / "cli.db")])
    assert result.exit_code == 1


def test_invalid_mode_exits_nonzero(tmp_path: Path) -> None:
    result = runner.invoke(app, ["analyze", "whatever", "--mode", "karaoke", "--db", str(tmp_path / "cli.db")])
    assert result.exit_code == 1


def test_list_rejects_unknown_status(tmp_path: Path) -> None:
    result = runner.invoke(app, ["list", "--status", "done", "--db", str(tmp_path / "cli.db")])
    assert result.exit_code == 1
