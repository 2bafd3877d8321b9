from __future__ import annotations

from .csv_report import render_csv, write_csv
from .html_report import render_html, write_html
from .records import (
    MISSING,
    Cell,
    DeviceRecord,
    HierarchyRecord,
    IssueGroup,
    MeshRecord,
    ReportTable,
    apps_table,
    device_record,
    device_records,
    devices_table,
    hierarchy_records,
    hierarchy_table,
    hubs_table,
    issue_groups,
    issues_tables,
    mesh_records,
    mesh_table,
)
from .terminal import print_table

__all__ = [
    "MISSING",
    "Cell",
    "DeviceRecord",
    "HierarchyRecord",
    "IssueGroup",
    "MeshRecord",
    "ReportTable",
    "apps_table",
    "device_record",
    "device_records",
    "devices_table",
    "hierarchy_records",
    "hierarchy_table",
    "hubs_table",
    "issue_groups",
    "issues_tables",
    "mesh_records",
    "mesh_table",
    "print_table",
    "render_csv",
    "render_html",
    "write_csv",
    "write_html",
]
