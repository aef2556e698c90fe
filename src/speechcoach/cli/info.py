"""speechcoach info command."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.exceptions import RecordingNotFoundError
from speechcoach.db.repository import Repository


def register(app: typer.Typer) -> None:
    @app.command("info")
    def info_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID to inspect"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Show a recording's metadata, analysis status and coaching headline."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        try:
            detail = repo.get_recording_detail(recording_id)
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()

        if not detail.file_exists:
            error(f"Video file is missing: {detail.file_path}")
        output_json(detail.model_dump(), pretty=True)
