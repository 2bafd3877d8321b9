from __future__ import annotations

from typing import Annotated

import typer

from hubmesh.utils.logging import setup_logging

from . import config as config_cmd
from . import exclude as exclude_cmd
from . import options as options_cmd
from .info import register as register_info
from .init_cmd import register as register_init
from .inventory import register as register_inventory
from .issues import register as register_issues
from .scan import register as register_scan

app = typer.Typer(
    help="hubmesh - device inventory and Hub Mesh health checks", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")
app.add_typer(exclude_cmd.app, name="exclude")
app.add_typer(options_cmd.app, name="options")

register_init(app)
register_scan(app)
register_inventory(app)
register_issues(app)
register_info(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """hubmesh CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"hubmesh version {get_version('hubmesh')}")
        raise typer.Exit()
