from __future__ import annotations

import csv
import io
from pathlib import Path

from .records import ReportTable


def _linked_columns(table: ReportTable) -> list[int]:
    return [
        index
        for index in range(len(table.columns))
        if any(index < len(row) and row[index].url for row in table.rows)
    ]


def render_csv(tables: list[ReportTable]) -> str:
    """One CSV document; linked columns get an extra ``<column> URL`` column.

    Several tables are stacked with a leading ``Section`` column.
    """
    output = io.StringIO()
    writer = csv.writer(output)

    sectioned = len(tables) > 1
    for position, table in enumerate(tables):
        linked = _linked_columns(table)
        header = []
        for index, column in enumerate(table.columns):
            header.append(column)
            if index in linked:
                header.append(f"{column} URL")
        if sectioned:
            header.insert(0, "Section")
        if position == 0 or sectioned:
            writer.writerow(header)

        for row in table.rows:
            values = []
            for index, cell in enumerate(row):
                values.append(cell.text)
                if index in linked:
                    values.append(cell.url)
            if sectioned:
                values.insert(0, table.title)
            writer.writerow(values)

    return output.getvalue()


def write_csv(path: Path, tables: list[ReportTable]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        handle.write(render_csv(tables))
    return path
