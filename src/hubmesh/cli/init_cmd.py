from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from hubmesh.errors import PersistenceError

from .common import build_database, load_settings_or_exit, resolve_config_path_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def init(
        data_dir: Annotated[
            Path | None,
            typer.Option("--data-dir", "--path", help="Custom data directory"),
        ] = None,
    ) -> None:
        """Initialize the hubmesh data directory."""
        console = Console()

        settings = load_settings_or_exit()
        db = build_database(settings, data_dir=data_dir)
        try:
            db.init()
        except PersistenceError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        console.print(f"[green]✓[/green] Initialized hubmesh data dir at: {db.path}")
        console.print(f"  • {db.snapshot_path} - Inventory")

        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)
        if not config_exists:
            console.print("\nNo config file. Run 'hubmesh config init' to create one.")
        else:
            console.print(f"  • {config_path} - Configuration")
