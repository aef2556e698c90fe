"""speechcoach result command."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.exceptions import RecordingNotFoundError
from speechcoach.db.repository import Repository


def register(app: typer.Typer) -> None:
    @app.command("result")
    def result_cmd(
        recording_id: str = typer.Argument(..., help="Recording ID"),
        raw: bool = typer.Option(False, "--raw", help="Print the stored analysis as-is"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Show coaching feedback for an analyzed recording."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        try:
            status = repo.get_status(recording_id)
            report = repo.get_result(recording_id)
        except RecordingNotFoundError:
            error(f"Recording not found: {recording_id}")
            raise typer.Exit(1)
        finally:
            repo.close()

        if report is None:
            error(f"No analysis for {recording_id} (status: {status})")
            raise typer.Exit(1)

        if raw:
            output_json(report.model_dump(mode="json"), pretty=True)
            return
        output_json({
            "recording_id": recording_id,
            "mode": report.mode,
            "source": report.source,
            "feedback": report.feedback().model_dump(),
        }, pretty=True)
