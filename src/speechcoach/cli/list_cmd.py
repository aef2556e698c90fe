"""speechcoach list command."""

from __future__ import annotations

from pathlib import Path

import typer

from speechcoach.cli.output import error, output_json
from speechcoach.core.config import get_config
from speechcoach.core.constants import STATUS_COMPLETED, STATUS_FAILED, STATUS_NOT_REQUESTED, STATUS_PENDING
from speechcoach.db.repository import Repository

_STATUSES = (STATUS_NOT_REQUESTED, STATUS_PENDING, STATUS_COMPLETED, STATUS_FAILED)


def register(app: typer.Typer) -> None:
    @app.command("list")
    def list_cmd(
        status: str = typer.Option(None, "--status", help=f"Only recordings in this state: {', '.join(_STATUSES)}"),
        db: str = typer.Option(None, "--db", help="Database path override"),
    ) -> None:
        """List recordings newest first, with status and overall score."""
        if status is not None and status not in _STATUSES:
            error(f"Unknown status: {status} (choose from {', '.join(_STATUSES)})")
            raise typer.Exit(1)

        config = get_config(db_path=Path(db) if db else None)
        repo = Repository(config.db_path)

        try:
            items = repo.list_items(status=status)
        finally:
            repo.close()

        scores = [i.overall_score for i in items if i.overall_score is not None]
        output_json({
            "recordings": [i.model_dump() for i in items],
            "total": len(items),
            "analyzed": len(scores),
            "best_overall_score": max(scores) if scores else None,
        })
