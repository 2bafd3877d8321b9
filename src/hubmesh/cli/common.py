from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console

from hubmesh.config import (
    Settings,
    data_dir_from_settings,
    expand_path,
    get_settings,
    resolve_config_path,
)
from hubmesh.errors import PersistenceError
from hubmesh.models import Snapshot
from hubmesh.reports import ReportTable, print_table, write_csv, write_html
from hubmesh.storage import Database


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_database(settings: Settings, data_dir: Path | None = None) -> Database:
    path = data_dir or data_dir_from_settings(settings)
    return Database(path)


def load_snapshot_or_exit(db: Database) -> Snapshot:
    try:
        return db.load_snapshot()
    except PersistenceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def save_snapshot_or_exit(db: Database, snapshot: Snapshot) -> None:
    try:
        db.save_snapshot(snapshot)
    except PersistenceError as exc:
        typer.echo(f"{exc}\nNothing changed.", err=True)
        raise typer.Exit(1) from exc


def select_device_ids(snapshot: Snapshot, hub: str | None) -> list[str]:
    if hub is None:
        return list(snapshot.devices)
    if hub not in snapshot.hubs:
        typer.echo(f"Unknown hub: {hub}", err=True)
        raise typer.Exit(1)
    return [device.id for device in snapshot.devices_on(hub)]


def _write_report(console: Console, write: Callable[[], Path], path: Path) -> bool:
    try:
        write()
    except OSError as exc:
        typer.echo(f"Cannot write report {path}: {exc}", err=True)
        return False
    console.print(f"[green]✓[/green] Wrote {path}")
    return True


def emit_report(
    console: Console,
    snapshot: Snapshot,
    name: str,
    title: str,
    tables: list[ReportTable],
    html: bool | None,
    csv: bool | None,
) -> bool:
    """Print ``tables`` and write HTML/CSV files when enabled.

    ``html``/``csv`` override the stored report toggles when given. Returns
    False when a report file could not be written.
    """
    for table in tables:
        print_table(console, table)

    reports = snapshot.config.reports
    output_dir = expand_path(reports.output_dir)
    ok = True
    if reports.html if html is None else html:
        html_path = output_dir / f"hubmesh-{name}.html"
        ok &= _write_report(
            console,
            lambda: write_html(html_path, title, tables, snapshot.config.last_updated),
            html_path,
        )
    if reports.csv if csv is None else csv:
        csv_path = output_dir / f"hubmesh-{name}.csv"
        ok &= _write_report(console, lambda: write_csv(csv_path, tables), csv_path)
    return ok


def emit_report_or_exit(
    console: Console,
    snapshot: Snapshot,
    name: str,
    title: str,
    tables: list[ReportTable],
    html: bool | None,
    csv: bool | None,
) -> None:
    if not emit_report(console, snapshot, name, title, tables, html, csv):
        raise typer.Exit(1)
