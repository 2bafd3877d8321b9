from __future__ import annotations

import httpx
import typer
from rich.console import Console

from hubmesh.core import classify, notify_issues
from hubmesh.models import IssueReport, NotificationConfig
from hubmesh.reports import issue_groups, issues_tables

from .common import (
    build_database,
    emit_report,
    load_settings_or_exit,
    load_snapshot_or_exit,
    select_device_ids,
)
from .inventory import CsvOption, HtmlOption, HubOption


def _notify(
    console: Console, report: IssueReport, notifications: NotificationConfig
) -> None:
    with httpx.Client() as client:
        results = notify_issues(report, notifications, client)
    for result in results:
        if result.ok:
            console.print(f"[green]✓[/green] Notified {result.category.value}")
        else:
            console.print(
                f"[yellow]![/yellow] Notification for {result.category.value} "
                f"failed ({result.url}): {result.error}"
            )


def register(app: typer.Typer) -> None:
    @app.command()
    def issues(
        hub: str | None = HubOption,
        notify: bool | None = typer.Option(
            None,
            "--notify/--no-notify",
            help="Call webhooks for triggered categories (default: stored setting)",
        ),
        html: bool | None = HtmlOption,
        csv: bool | None = CsvOption,
    ) -> None:
        """Run the health checks and list devices with issues."""
        console = Console()

        settings = load_settings_or_exit()
        snapshot = load_snapshot_or_exit(build_database(settings))

        report = classify(snapshot, select_device_ids(snapshot, hub))
        groups = issue_groups(snapshot, report, settings.scanning.protocol)
        tables = issues_tables(groups)
        written = emit_report(
            console, snapshot, "issues", "Device Issues", tables, html, csv
        )

        notifications = snapshot.config.notifications
        if notify is not None:
            notifications = notifications.model_copy(update={"enabled": notify})
        if notifications.enabled:
            _notify(console, report, notifications)

        if not written:
            raise typer.Exit(1)
