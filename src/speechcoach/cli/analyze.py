"""speechcoach analyze command."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.constants import ANALYSIS_MODES, DEFAULT_ANALYSIS_MODE
from speechcoach.core.exceptions import AnalysisFailedError, SpeechCoachError
from speechcoach.db.repository import Repository
from speechcoach.pipeline.analyze import request_analysis


def register(app: typer.Typer) -> None:
    @app.command("analyze")
    def analyze(
        recording_id: str = typer.Argument(..., help="Recording ID to analyze (or retry)"),
        mode: str = typer.Option(DEFAULT_ANALYSIS_MODE, "--mode", help=f"One of: {', '.join(ANALYSIS_MODES)}"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Request AI analysis for a recording."""
        if mode not in ANALYSIS_MODES:
            error(f"Unknown mode: {mode} (choose from {', '.join(ANALYSIS_MODES)})")
            raise typer.Exit(1)

        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        try:
            result = asyncio.run(request_analysis(recording_id, repo, config, mode=mode))
            output_json(result)
        except AnalysisFailedError as e:
            error(e.user_message)
            output_json({"status": "failed", "recording_id": recording_id, "error": str(e)})
            raise typer.Exit(1)
        except SpeechCoachError as e:
            error(str(e))
            raise typer.Exit(1)
        finally:
            repo.close()
