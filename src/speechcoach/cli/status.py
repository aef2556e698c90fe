"""speechcoach status command."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.exceptions import RecordingNotFoundError
from speechcoach.db.repository import Repository
from speechcoach.pipeline.status import poll_status


async def _watch(repo: Repository, recording_id: str, interval: float) -> None:
    async for status in poll_status(repo, recording_id, interval=interval):
        output_json({"recording_id": recording_id, "status": status})


def register(app: typer.Typer) -> None:
    @app.command("status")
    def status_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID"),
        watch: bool = typer.Option(False, "--watch", help="Keep polling until completed or failed"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Show the analysis status of a recording."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        try:
            if watch:
                asyncio.run(_watch(repo, recording_id, config.status_poll_interval_sec))
            else:
                recording = repo.get_recording(recording_id)
                output_json({
                    "recording_id": recording.id,
                    "status": recording.analysis_status,
                    "mode": recording.analysis_mode,
                    "error": recording.analysis_error,
                })
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()
