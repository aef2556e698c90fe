"""speechcoach notes / skip / delete commands."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.exceptions import RecordingNotFoundError
from speechcoach.db.repository import Repository
from speechcoach.pipeline.analyze import skip_analysis


def register(app: typer.Typer) -> None:
    @app.command("notes")
    def notes_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID"),
        text: str = typer.Argument(..., help="Your own observations about the take"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Save personal observations for a recording."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)
        try:
            repo.update_observations(recording_id, text)
            output_json({"recording_id": recording_id, "observations": text})
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()

    @app.command("skip")
    def skip_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Decline analysis for a recording."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)
        try:
            status = skip_analysis(recording_id, repo)
            output_json({"recording_id": recording_id, "status": status})
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()

    @app.command("delete")
    def delete_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Remove a recording from the store (the video file is left alone)."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)
        try:
            repo.delete_recording(recording_id)
            output_json({"recording_id": recording_id, "status": "deleted"})
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()
