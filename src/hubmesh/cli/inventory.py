from __future__ import annotations

import typer
from rich.console import Console

from hubmesh.reports import (
    apps_table,
    device_records,
    devices_table,
    hierarchy_records,
    hierarchy_table,
    hubs_table,
    mesh_records,
    mesh_table,
)

from .common import (
    build_database,
    emit_report_or_exit,
    load_settings_or_exit,
    load_snapshot_or_exit,
    select_device_ids,
)

HubOption = typer.Option(None, "--hub", help="Only devices of this hub address")
HtmlOption = typer.Option(None, "--html/--no-html", help="Write an HTML report")
CsvOption = typer.Option(None, "--csv/--no-csv", help="Write a CSV report")


def list_devices(
    hub: str | None = HubOption,
    html: bool | None = HtmlOption,
    csv: bool | None = CsvOption,
) -> None:
    """List devices with hub, protocol, status and apps using them."""
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))
    protocol = settings.scanning.protocol

    records = device_records(snapshot, select_device_ids(snapshot, hub), protocol)
    emit_report_or_exit(
        Console(), snapshot, "devices", "Devices", [devices_table(records)], html, csv
    )


def list_hierarchy(
    hub: str | None = HubOption,
    html: bool | None = HtmlOption,
    csv: bool | None = CsvOption,
) -> None:
    """List parent devices with their child devices nested below."""
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))
    protocol = settings.scanning.protocol

    records = hierarchy_records(snapshot, select_device_ids(snapshot, hub), protocol)
    emit_report_or_exit(
        Console(),
        snapshot,
        "hierarchy",
        "Parent / Child Devices",
        [hierarchy_table(records)],
        html,
        csv,
    )


def list_mesh(
    hub: str | None = HubOption,
    html: bool | None = HtmlOption,
    csv: bool | None = CsvOption,
) -> None:
    """List Hub Mesh source devices with their remote devices."""
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))
    protocol = settings.scanning.protocol

    records = mesh_records(snapshot, select_device_ids(snapshot, hub), protocol)
    emit_report_or_exit(
        Console(),
        snapshot,
        "mesh",
        "Hub Mesh Devices",
        [mesh_table(records)],
        html,
        csv,
    )


def list_apps(
    html: bool | None = HtmlOption,
    csv: bool | None = CsvOption,
) -> None:
    """List apps that use at least one device."""
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))

    table = apps_table(snapshot, settings.scanning.protocol)
    emit_report_or_exit(Console(), snapshot, "apps", "Apps", [table], html, csv)


def list_hubs(
    html: bool | None = HtmlOption,
    csv: bool | None = CsvOption,
) -> None:
    """List scanned hubs."""
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))

    table = hubs_table(snapshot, settings.scanning.protocol)
    emit_report_or_exit(Console(), snapshot, "hubs", "Hubs", [table], html, csv)


def register(app: typer.Typer) -> None:
    app.command("devices")(list_devices)
    app.command("hierarchy")(list_hierarchy)
    app.command("mesh")(list_mesh)
    app.command("apps")(list_apps)
    app.command("hubs")(list_hubs)
