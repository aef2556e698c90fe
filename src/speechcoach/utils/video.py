"""Locate practice recordings on disk and read their metadata."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path

from speechcoach.core.constants import VIDEO_EXTENSIONS
from speechcoach.core.exceptions import FFmpegError


@dataclass
class VideoMeta:
    duration_sec: float
    width: int | None
    height: int | None
    codec: str | None
    file_size_bytes: int


def is_video_file(path: Path) -> bool:
    """True for an existing file with a known recording extension."""
    return path.is_file() and path.suffix.lower() in VIDEO_EXTENSIONS


def discover_videos(path: Path) -> list[Path]:
    """Recordings to register: the file itself, or the videos at the top of a directory."""
    if path.is_file():
        return [path] if is_video_file(path) else []
    if path.is_dir():
        return sorted(p for p in path.iterdir() if is_video_file(p))
    return []


def get_video_info(path: Path) -> VideoMeta:
    """Probe duration, frame size and codec with ffprobe."""
    cmd = [
        "ffprobe", "-v", "quiet",
        "-print_format", "json",
        "-show_format", "-show_streams",
        str(path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=30)
    except FileNotFoundError:
        raise FFmpegError("ffprobe not found. Install ffmpeg to record durations.", cmd=" ".join(cmd))
    except subprocess.CalledProcessError as e:
        raise FFmpegError(f"ffprobe failed: {e.stderr}", cmd=" ".join(cmd), returncode=e.returncode)
    except subprocess.TimeoutExpired:
        raise FFmpegError("ffprobe timed out", cmd=" ".join(cmd))

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as e:
        raise FFmpegError(f"ffprobe returned unreadable output: {e}", cmd=" ".join(cmd))
    fmt = data.get("format", {})
    video_stream = next((s for s in data.get("streams", []) if s.get("codec_type") == "video"), None)

    return VideoMeta(
        duration_sec=float(fmt.get("duration", 0) or 0),
        width=video_stream.get("width") if video_stream else None,
        height=video_stream.get("height") if video_stream else None,
        codec=video_stream.get("codec_name") if video_stream else None,
        file_size_bytes=path.stat().st_size,
    )
