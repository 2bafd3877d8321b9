from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .records import Cell, ReportTable

COLUMN_STYLES = ("cyan", "green")


def _render_cell(cell: Cell) -> str:
    text = escape(cell.text)
    if cell.url:
        return f"[link={cell.url}]{text}[/link]"
    return text


def print_table(console: Console, report: ReportTable) -> None:
    table = Table(title=report.title, title_justify="left")
    for index, column in enumerate(report.columns):
        style = COLUMN_STYLES[index] if index < len(COLUMN_STYLES) else None
        table.add_column(column, style=style)

    for row in report.rows:
        table.add_row(*(_render_cell(cell) for cell in row))

    if report.rows:
        console.print(table)
    else:
        console.print(f"[bold]{escape(report.title)}[/bold]: nothing to show")
    for note in report.notes:
        console.print(f"[dim]{escape(note)}[/dim]")
    console.print()
