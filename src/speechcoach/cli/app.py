"""Typer root app; wires all subcommands together."""

from __future__ import annotations

import json

import typer

from speechcoach import __version__

app = typer.Typer(
    name="speechcoach",
    help="speechcoach: AI coaching feedback for recorded speech practice.",
    add_completion=False,
    no_args_is_help=True,
)


@app.command("version")
def version_cmd() -> None:
    """Print version info as JSON."""
    print(json.dumps({"version": __version__, "package": "speechcoach"}))


from speechcoach.cli.record import register as register_record  # noqa: E402
from speechcoach.cli.analyze import register as register_analyze  # noqa: E402
from speechcoach.cli.status import register as register_status  # noqa: E402
from speechcoach.cli.result import register as register_result  # noqa: E402
from speechcoach.cli.list_cmd import register as register_list  # noqa: E402
from speechcoach.cli.info import register as register_info  # noqa: E402
from speechcoach.cli.manage import register as register_manage  # noqa: E402
from speechcoach.cli.stats import register as register_stats  # noqa: E402
from speechcoach.cli.config_cmd import config_app  # noqa: E402

register_record(app)
register_analyze(app)
register_status(app)
register_result(app)
register_list(app)
register_info(app)
register_manage(app)
register_stats(app)
app.add_typer(config_app, name="config", help="Show/set configuration")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
