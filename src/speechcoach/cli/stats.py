"""speechcoach stats command."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import output_json
from speechcoach.core.config import get_config
from speechcoach.db.repository import Repository


def register(app: typer.Typer) -> None:
    @app.command("stats")
    def stats_cmd(
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """Aggregate statistics over all recordings."""
        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)
        try:
            output_json(repo.statistics().model_dump())
        finally:
            repo.close()
