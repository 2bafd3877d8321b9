from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from hubmesh.core import Resolved, lookup
from hubmesh.errors import PersistenceError
from hubmesh.models import IssueCategory
from hubmesh.reports import MISSING

from .common import build_database, load_settings_or_exit, load_snapshot_or_exit

app = typer.Typer(
    no_args_is_help=True, help="Exempt devices from a single issue category."
)


@app.command("add")
def add_exclusion(
    category: IssueCategory = typer.Argument(..., help="Issue category"),
    device_id: str = typer.Argument(..., help="Device id ({hub}-{local id})"),
) -> None:
    settings = load_settings_or_exit()
    db = build_database(settings)
    console = Console()

    snapshot = load_snapshot_or_exit(db)
    if device_id not in snapshot.devices:
        console.print(f"[yellow]![/yellow] {device_id} is not in the current inventory")

    try:
        added = db.add_exclusion(category, device_id)
    except PersistenceError as exc:
        typer.echo(f"{exc}\nNothing changed.", err=True)
        raise typer.Exit(1) from exc

    if added:
        console.print(f"[green]✓[/green] Excluded {device_id} from {category.value}")
    else:
        console.print(f"{device_id} is already excluded from {category.value}")


@app.command("remove")
def remove_exclusion(
    category: IssueCategory = typer.Argument(..., help="Issue category"),
    device_id: str = typer.Argument(..., help="Device id ({hub}-{local id})"),
) -> None:
    settings = load_settings_or_exit()
    db = build_database(settings)
    console = Console()

    try:
        removed = db.remove_exclusion(category, device_id)
    except PersistenceError as exc:
        typer.echo(f"{exc}\nNothing changed.", err=True)
        raise typer.Exit(1) from exc

    if removed:
        console.print(
            f"[green]✓[/green] {device_id} is checked for {category.value} again"
        )
    else:
        console.print(
            f"[yellow]![/yellow] {device_id} was not excluded from {category.value}"
        )
        raise typer.Exit(1)


@app.command("list")
def list_exclusions() -> None:
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))
    console = Console()

    table = Table()
    table.add_column("Category", style="cyan")
    table.add_column("Device", style="green")
    table.add_column("Device Id")
    for category in IssueCategory:
        for device_id in snapshot.config.exclusions.get(category, []):
            result = lookup(snapshot, device_id)
            name = result.device.name if isinstance(result, Resolved) else MISSING
            table.add_row(category.value, name, device_id)

    if table.row_count:
        console.print(table)
    else:
        console.print("No exclusions defined.")
