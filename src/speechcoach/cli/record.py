"""speechcoach add command."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json, progress
from speechcoach.core.config import get_config
from speechcoach.core.exceptions import SpeechCoachError
from speechcoach.db.repository import Repository
from speechcoach.pipeline.record import register_recording
from speechcoach.utils.video import discover_videos


def register(app: typer.Typer) -> None:
    @app.command("add")
    def add(
        path: str = typer.Argument(..., help="Video file or directory of videos"),
        prompt: str = typer.Option("", "--prompt", help="Practice prompt the speaker answered"),
        facing: str = typer.Option("front", "--facing", help="Camera facing: front or back"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Register recorded practice video(s)."""
        if facing not in ("front", "back"):
            error(f"Invalid --facing value: {facing} (use front or back)")
            raise typer.Exit(1)

        videos = discover_videos(Path(path).expanduser().resolve())
        if not videos:
            error(f"No video files found at: {path}")
            raise typer.Exit(1)

        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        results = []
        try:
            for video_path in videos:
                progress(f"Adding: {video_path.name}")
                try:
                    results.append(register_recording(video_path, repo, prompt_text=prompt, facing=facing))
                except SpeechCoachError as e:
                    error(str(e))
                    results.append({"status": "error", "file_name": video_path.name, "error": str(e)})
        finally:
            repo.close()

        if len(results) == 1:
            output_json(results[0])
        else:
            output_json({"results": results, "total": len(results)})
