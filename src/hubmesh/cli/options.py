from __future__ import annotations

from collections.abc import Callable

import typer
from rich.console import Console

from hubmesh.models import IssueCategory, Snapshot, WebhookConfig

from .common import (
    build_database,
    load_settings_or_exit,
    load_snapshot_or_exit,
    save_snapshot_or_exit,
)

app = typer.Typer(
    no_args_is_help=True,
    help="Health-check thresholds, notifications and report outputs.",
)


def _update(mutate: Callable[[Snapshot], None]) -> Snapshot:
    settings = load_settings_or_exit()
    db = build_database(settings)
    snapshot = load_snapshot_or_exit(db)
    mutate(snapshot)
    save_snapshot_or_exit(db, snapshot)
    return snapshot


@app.command("show")
def show_options() -> None:
    settings = load_settings_or_exit()
    snapshot = load_snapshot_or_exit(build_database(settings))
    config = snapshot.config
    console = Console()

    console.print("[bold]Health checks[/bold]")
    console.print(f"Low battery threshold: {config.low_battery_charge_threshold}%")
    console.print(f"Inactivity threshold: {config.inactivity_threshold_minutes} min")

    notifications = config.notifications
    console.print("\n[bold]Notifications[/bold]")
    console.print(f"Enabled: {notifications.enabled}")
    console.print(
        f"Global webhook: {notifications.global_url or '-'}"
        f" ({'on' if notifications.global_url_enabled else 'off'})"
    )
    for category in IssueCategory:
        hook = notifications.categories.get(category)
        if hook is not None and hook.url:
            state = "on" if hook.enabled else "off"
            console.print(f"  {category.value}: {hook.url} ({state})")

    reports = config.reports
    console.print("\n[bold]Reports[/bold]")
    console.print(f"HTML: {reports.html}  CSV: {reports.csv}")
    console.print(f"Output directory: {reports.output_dir}")

    console.print(f"\nLast scan: {config.last_updated or 'never'}")


@app.command("thresholds")
def set_thresholds(
    low_battery: int | None = typer.Option(
        None, "--low-battery", min=0, max=100, help="Low battery charge percent"
    ),
    inactivity_minutes: int | None = typer.Option(
        None, "--inactivity-minutes", min=1, help="Minutes without activity"
    ),
) -> None:
    def mutate(snapshot: Snapshot) -> None:
        if low_battery is not None:
            snapshot.config.low_battery_charge_threshold = low_battery
        if inactivity_minutes is not None:
            snapshot.config.inactivity_threshold_minutes = inactivity_minutes

    config = _update(mutate).config
    Console().print(
        f"[green]✓[/green] Low battery < {config.low_battery_charge_threshold}%,"
        f" inactive after {config.inactivity_threshold_minutes} min"
    )


@app.command("notify")
def set_notify(
    enabled: bool = typer.Option(
        ..., "--on/--off", help="Turn issue notifications on or off"
    ),
) -> None:
    def mutate(snapshot: Snapshot) -> None:
        snapshot.config.notifications.enabled = enabled

    _update(mutate)
    Console().print(f"[green]✓[/green] Notifications {'on' if enabled else 'off'}")


@app.command("webhook")
def set_webhook(
    url: str | None = typer.Option(None, "--url", help="Webhook URL"),
    category: IssueCategory | None = typer.Option(
        None, "--category", help="Category webhook; global fallback when omitted"
    ),
    enable: bool | None = typer.Option(None, "--enable/--disable"),
) -> None:
    def mutate(snapshot: Snapshot) -> None:
        notifications = snapshot.config.notifications
        if category is None:
            if url is not None:
                notifications.global_url = url
            if enable is not None:
                notifications.global_url_enabled = enable
            return
        hook = notifications.categories.setdefault(category, WebhookConfig())
        if url is not None:
            hook.url = url
        if enable is not None:
            hook.enabled = enable

    _update(mutate)
    target = category.value if category else "global"
    Console().print(f"[green]✓[/green] Updated {target} webhook")


@app.command("reports")
def set_reports(
    html: bool | None = typer.Option(None, "--html/--no-html"),
    csv: bool | None = typer.Option(None, "--csv/--no-csv"),
    output_dir: str | None = typer.Option(None, "--output-dir"),
) -> None:
    def mutate(snapshot: Snapshot) -> None:
        reports = snapshot.config.reports
        if html is not None:
            reports.html = html
        if csv is not None:
            reports.csv = csv
        if output_dir is not None:
            reports.output_dir = output_dir

    snapshot = _update(mutate)
    reports = snapshot.config.reports
    Console().print(
        f"[green]✓[/green] HTML: {reports.html}, CSV: {reports.csv},"
        f" output: {reports.output_dir}"
    )
