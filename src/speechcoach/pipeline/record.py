"""Register recorded practice videos in the store."""

from __future__ import annotations

import secrets
import string
import sys
import time
from pathlib import Path

from speechcoach.core.exceptions import FFmpegError, SpeechCoachError
from speechcoach.db.models import Recording
from speechcoach.db.repository import Repository
from speechcoach.utils.video import get_video_info, is_video_file

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_recording_id() -> str:
    """recording_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"recording_{int(time.time() * 1000)}_{suffix}"


def register_recording(
    path: Path,
    repo: Repository,
    *,
    prompt_text: str = "",
    facing: str = "front",
) -> dict:
    """Store metadata for one video. Returns JSON-serializable result dict."""
    path = path.resolve()
    if not path.exists():
        raise SpeechCoachError(f"File not found: {path}")
    if not is_video_file(path):
        raise SpeechCoachError(f"Not a video file: {path}")

    duration: float | None = None
    print(f"  Probing: {path.name}...", file=sys.stderr)
    try:
        duration = get_video_info(path).duration_sec or None
    except FFmpegError as e:
        print(f"  Warning: duration unknown ({e})", file=sys.stderr)

    recording = Recording(
        id=generate_recording_id(),
        file_path=str(path),
        file_name=path.name,
        prompt_text=prompt_text,
        facing=facing,
        duration_sec=duration,
        file_size_bytes=path.stat().st_size,
    )
    repo.insert_recording(recording)

    return {
        "status": "registered",
        "recording_id": recording.id,
        "file_name": recording.file_name,
        "duration_sec": duration,
        "file_size_bytes": recording.file_size_bytes,
    }
