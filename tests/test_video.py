"""Tests for video discovery and ffprobe error mapping."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from speechcoach.core.exceptions import FFmpegError
from speechcoach.utils.video import discover_videos, get_video_info, is_video_file


def test_discover_videos(tmp_path: Path) -> None:
    (tmp_path / "b.MOV").write_bytes(b"x")
    (tmp_path / "a.mp4").write_bytes(b"x")
    (tmp_path / "notes.txt").write_text("x")

    assert [p.name for p in discover_videos(tmp_path)] == ["a.mp4", "b.MOV"]
    assert discover_videos(tmp_path / "notes.txt") == []
    assert discover_videos(tmp_path / "missing") == []
    assert is_video_file(tmp_path / "a.mp4")


def test_get_video_info_parses_ffprobe(tmp_path: Path) -> None:
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x" * 10)
    stdout = '{"format": {"duration": "12.5"}, "streams": [{"codec_type": "video", "width": 720, "height": 1280, "codec_name": "h264"}]}'
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")

    with patch("speechcoach.utils.video.subprocess.run", return_value=completed):
        meta = get_video_info(video)

    assert meta.duration_sec == 12.5
    assert (meta.width, meta.height, meta.codec) == (720, 1280, "h264")
    assert meta.file_size_bytes == 10


def test_missing_ffprobe_is_ffmpeg_error(tmp_path: Path) -> None:
    with patch("speechcoach.utils.video.subprocess.run", side_effect=FileNotFoundError):
        with pytest.raises(FFmpegError, match="ffprobe not found"):
            get_video_info(tmp_path / "a.mp4")
