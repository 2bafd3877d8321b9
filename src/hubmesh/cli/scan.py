from __future__ import annotations

import logging
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from hubmesh.config import hubs_file_from_settings
from hubmesh.core import parse_address_list, run_new_scan
from hubmesh.errors import NoReachableHubsError

from .common import (
    build_database,
    load_settings_or_exit,
    load_snapshot_or_exit,
    save_snapshot_or_exit,
)

logger = logging.getLogger(__name__)


def _read_hubs_file(path: Path) -> list[str]:
    try:
        return parse_address_list(path.read_text(encoding="utf-8"))
    except OSError as exc:
        typer.echo(f"Cannot read hub list {path}: {exc}", err=True)
        raise typer.Exit(1) from exc


def scan(
    addresses: list[str] | None = typer.Argument(
        None,
        help="Hub IP addresses. Uses the hubs file if omitted.",
    ),
    hubs_file: Path | None = typer.Option(
        None,
        "--hubs-file",
        help="File with one hub address per line ('#' starts a comment)",
    ),
) -> None:
    """Poll hubs and replace their inventory in the data directory."""
    console = Console()

    settings = load_settings_or_exit()
    db = build_database(settings)

    candidates = list(addresses or [])
    if hubs_file is not None:
        candidates.extend(_read_hubs_file(hubs_file))
    if not candidates:
        default_file = hubs_file_from_settings(settings)
        if not default_file.exists():
            typer.echo(
                f"No hub addresses given and {default_file} does not exist.", err=True
            )
            raise typer.Exit(1)
        console.print(f"Using hub list from {default_file}")
        candidates = _read_hubs_file(default_file)

    snapshot = load_snapshot_or_exit(db)

    console.print(f"Scanning {len(candidates)} hub address(es)...")
    logger.info(
        "Scan settings: ports=%s, probe_timeout=%.2fs, replace_mode=%s",
        settings.scanning.ports,
        settings.scanning.probe_timeout,
        settings.scanning.replace_mode,
    )
    try:
        with httpx.Client() as client:
            outcome = run_new_scan(snapshot, candidates, settings.scanning, client)
    except NoReachableHubsError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc

    for candidate in outcome.invalid:
        console.print(f"[yellow]![/yellow] {candidate}: invalid or unreachable")
    for address in outcome.failed:
        console.print(f"[yellow]![/yellow] {address}: hub could not be read")

    table = Table()
    table.add_column("Hub", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Version")
    table.add_column("Devices")
    for address in outcome.scanned:
        hub = snapshot.hubs[address]
        table.add_row(
            hub.name,
            address,
            hub.platform_version,
            str(len(snapshot.devices_on(address))),
        )
    console.print(table)

    save_snapshot_or_exit(db, snapshot)
    console.print(
        f"\n[green]✓[/green] Scanned {len(outcome.scanned)} hub(s), "
        f"{outcome.device_count} device(s); saved to {db.snapshot_path}"
    )


def register(app: typer.Typer) -> None:
    app.command()(scan)
