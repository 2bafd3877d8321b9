from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from hubmesh.config import (
    Settings,
    data_dir_from_settings,
    hubs_file_from_settings,
    render_settings_toml,
    write_settings,
)
from hubmesh.core import parse_address_list
from hubmesh.storage import SNAPSHOT_FILE

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or create the settings file.")

HUBS_FILE_TEMPLATE = """\
# hubmesh hub list: one IPv4 address per line, '#' starts a comment
# 192.168.1.10   # main hub
"""


def _state(exists: bool) -> str:
    return "[green]present[/green]" if exists else "[yellow]missing[/yellow]"


@app.command("show")
def show_config() -> None:
    """Print the effective settings and the files they point at."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    console = Console()

    console.print(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings))

    inventory = data_dir_from_settings(settings) / SNAPSHOT_FILE
    console.print(f"Inventory: {inventory} ({_state(inventory.exists())})")

    hubs_file = hubs_file_from_settings(settings)
    if hubs_file.exists():
        count = len(parse_address_list(hubs_file.read_text(encoding="utf-8")))
        console.print(f"Hubs file: {hubs_file} ({_state(True)}, {count} address(es))")
    else:
        console.print(f"Hubs file: {hubs_file} ({_state(False)})")


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write default settings and an empty hub list next to them."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path}")
    else:
        write_settings(Settings(), path)
        typer.echo(f"Wrote default config to {path}")

    hubs_file = hubs_file_from_settings(load_settings_or_exit())
    if not hubs_file.exists():
        hubs_file.parent.mkdir(parents=True, exist_ok=True)
        hubs_file.write_text(HUBS_FILE_TEMPLATE, encoding="utf-8")
        typer.echo(f"Wrote hub list template to {hubs_file}")
