"""Shared fixtures: a temp-file repository with one registered recording."""

from __future__ import annotations

from pathlib import Path

import pytest

from speechcoach.db.models import Recording
from speechcoach.db.repository import Repository


@pytest.fixture
def repo(tmp_path: Path):
    r = Repository(tmp_path / "test.db")
    yield r
    r.close()


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    path = tmp_path / "take1.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64)
    return path


@pytest.fixture
def recording(repo: Repository, video_file: Path) -> Recording:
    rec = Recording(
        id="recording_1700000000000_abc123xyz",
        file_path=str(video_file),
        file_name=video_file.name,
        prompt_text="Tell me about yourself",
        duration_sec=125.0,
        file_size_bytes=video_file.stat().st_size,
    )
    repo.insert_recording(rec)
    return rec
