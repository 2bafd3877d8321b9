from __future__ import annotations

import typer
from rich.console import Console

from .common import (
    build_database,
    load_settings_or_exit,
    load_snapshot_or_exit,
    resolve_config_path_or_exit,
)


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show data directory info and inventory statistics."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        snapshot = load_snapshot_or_exit(db)

        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]hubmesh Info[/bold]\n")
        console.print(f"Data directory: {db.path}")
        console.print(f"Inventory: {db.snapshot_path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Configuration[/bold]")
        console.print(f"Protocol: {settings.scanning.protocol}")
        console.print(f"Probe ports: {', '.join(map(str, settings.scanning.ports))}")
        console.print(f"Probe timeout: {settings.scanning.probe_timeout}s")
        console.print(f"Replace mode: {settings.scanning.replace_mode}")

        devices = list(snapshot.devices.values())
        console.print("\n[bold]Statistics[/bold]")
        console.print(f"Hubs: {len(snapshot.hubs)}")
        console.print(f"Devices: {len(devices)}")
        children = sum(device.is_child_of_parent for device in devices)
        remotes = sum(device.is_mesh_linked for device in devices)
        console.print(f"  child devices: {children}")
        console.print(f"  mesh remote devices: {remotes}")
        console.print(f"Mesh source devices: {len(snapshot.mesh_reverse_index)}")
        console.print(f"Apps: {len(snapshot.apps)}")

        if snapshot.config.last_updated:
            console.print(f"Last scan: {snapshot.config.last_updated}")
        else:
            console.print("No scans recorded yet")
