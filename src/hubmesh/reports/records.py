"""Display-ready records built from a snapshot.

Renderers only lay these out; every relationship (hub names, parent and mesh
source labels, app labels, missing entities) is resolved here, and every URL
already carries the configured scheme.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from hubmesh.core.resolver import (
    Resolved,
    lookup,
    mesh_remotes,
    resolve_hierarchy_roots,
    resolve_mesh_sources,
)
from hubmesh.models import CATEGORY_TITLES, IssueCategory, IssueReport, Snapshot

MISSING = "(missing)"
TIME_FORMAT = "%Y-%m-%d %H:%M"


def scheme_url(protocol: str, url: str) -> str:
    return f"{protocol}://{url}" if url else ""


@dataclass
class Cell:
    text: str
    url: str = ""


@dataclass
class ReportTable:
    title: str
    columns: list[str]
    rows: list[list[Cell]] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


@dataclass
class DeviceRecord:
    id: str
    name: str
    url: str = ""
    hub: str = ""
    protocol: str = ""
    disabled: bool = False
    linked: bool = False
    battery: str = ""
    last_activity: str = ""
    in_use_by: list[Cell] = field(default_factory=list)
    parent: Cell = field(default_factory=lambda: Cell(""))
    source: Cell = field(default_factory=lambda: Cell(""))
    missing: bool = False

    @property
    def status(self) -> str:
        if self.missing:
            return MISSING
        return "Disabled" if self.disabled else "Enabled"

    @property
    def label(self) -> str:
        markers = []
        if self.disabled:
            markers.append("disabled")
        if self.linked:
            markers.append("linked")
        return f"{self.name} ({', '.join(markers)})" if markers else self.name


@dataclass
class HierarchyRecord:
    device: DeviceRecord
    children: list[HierarchyRecord] = field(default_factory=list)


@dataclass
class MeshRecord:
    source: DeviceRecord
    remotes: list[DeviceRecord] = field(default_factory=list)


@dataclass
class IssueGroup:
    category: IssueCategory
    title: str
    devices: list[DeviceRecord] = field(default_factory=list)
    suppressed: int = 0


def _format_time(value: datetime | None) -> str:
    return value.strftime(TIME_FORMAT) if value else ""


def _hub_name(snapshot: Snapshot, address: str) -> str:
    hub = snapshot.hubs.get(address)
    return hub.name if hub else f"{address} {MISSING}"


def _device_link(snapshot: Snapshot, device_id: str | None, protocol: str) -> Cell:
    if device_id is None:
        return Cell("")
    result = lookup(snapshot, device_id)
    if isinstance(result, Resolved):
        device = result.device
        return Cell(device.name or "", scheme_url(protocol, device.edit_url))
    return Cell(f"{device_id} {MISSING}")


def device_record(snapshot: Snapshot, device_id: str, protocol: str) -> DeviceRecord:
    result = lookup(snapshot, device_id)
    if not isinstance(result, Resolved):
        return DeviceRecord(id=device_id, name=f"{device_id} {MISSING}", missing=True)

    device = result.device
    in_use_by = []
    for app_id in device.in_use_by:
        app = snapshot.apps.get(app_id)
        if app is None:
            in_use_by.append(Cell(f"{app_id} {MISSING}"))
        else:
            in_use_by.append(
                Cell(app.display_name, scheme_url(protocol, app.config_url))
            )

    return DeviceRecord(
        id=device.id,
        name=device.name or "",
        url=scheme_url(protocol, device.edit_url),
        hub=_hub_name(snapshot, device.hub_address),
        protocol=device.protocol.value if device.protocol else "",
        disabled=device.disabled,
        linked=device.is_mesh_linked,
        battery=f"{device.battery}%" if device.battery is not None else "",
        last_activity=_format_time(device.last_activity),
        in_use_by=in_use_by,
        parent=_device_link(snapshot, device.parent_device_id, protocol),
        source=_device_link(snapshot, device.source_device_id, protocol),
    )


def device_records(
    snapshot: Snapshot, device_ids: Iterable[str], protocol: str
) -> list[DeviceRecord]:
    return [
        device_record(snapshot, device_id, protocol)
        for device_id in device_ids
        if device_id in snapshot.devices
    ]


def hierarchy_records(
    snapshot: Snapshot, device_ids: Iterable[str], protocol: str
) -> list[HierarchyRecord]:
    def build(device_id: str, visited: frozenset[str]) -> HierarchyRecord:
        record = HierarchyRecord(device_record(snapshot, device_id, protocol))
        device = snapshot.devices.get(device_id)
        if device is None:
            return record
        for child_id in device.child_device_ids:
            if child_id not in visited:
                record.children.append(build(child_id, visited | {child_id}))
        return record

    return [
        build(root_id, frozenset({root_id}))
        for root_id in resolve_hierarchy_roots(snapshot, device_ids)
    ]


def mesh_records(
    snapshot: Snapshot, device_ids: Iterable[str], protocol: str
) -> list[MeshRecord]:
    return [
        MeshRecord(
            source=device_record(snapshot, source_id, protocol),
            remotes=[
                device_record(snapshot, remote_id, protocol)
                for remote_id in mesh_remotes(snapshot, source_id)
            ],
        )
        for source_id in resolve_mesh_sources(snapshot, device_ids)
    ]


def issue_groups(
    snapshot: Snapshot, report: IssueReport, protocol: str
) -> list[IssueGroup]:
    return [
        IssueGroup(
            category=category,
            title=CATEGORY_TITLES[category],
            devices=device_records(snapshot, report.devices_in(category), protocol),
            suppressed=report.suppressed[category],
        )
        for category in IssueCategory
    ]


# Tables


def _device_row(record: DeviceRecord, name: Cell | None = None) -> list[Cell]:
    return [
        name or Cell(record.label, record.url),
        Cell(record.hub),
        Cell(record.protocol),
        Cell(record.status),
        Cell(record.battery),
        Cell(record.last_activity),
        record.parent,
        record.source,
    ]


DEVICE_COLUMNS = [
    "Device",
    "Hub",
    "Protocol",
    "Status",
    "Battery",
    "Last Activity",
    "Parent",
    "Mesh Source",
]


def devices_table(records: list[DeviceRecord]) -> ReportTable:
    table = ReportTable("Devices", [*DEVICE_COLUMNS, "In Use By"])
    for record in records:
        in_use_by = ", ".join(cell.text for cell in record.in_use_by)
        table.rows.append([*_device_row(record), Cell(in_use_by)])
    table.notes.append(f"{len(records)} device(s)")
    return table


def hierarchy_table(records: list[HierarchyRecord]) -> ReportTable:
    table = ReportTable("Parent / Child Devices", DEVICE_COLUMNS)

    def add(record: HierarchyRecord, depth: int) -> None:
        device = record.device
        prefix = "    " * (depth - 1) + "└── " if depth else ""
        table.rows.append(
            _device_row(device, Cell(f"{prefix}{device.label}", device.url))
        )
        for child in record.children:
            add(child, depth + 1)

    for record in records:
        add(record, 0)
    table.notes.append(f"{len(records)} top-level device(s)")
    return table


def mesh_table(records: list[MeshRecord]) -> ReportTable:
    table = ReportTable(
        "Hub Mesh Devices",
        ["Source Device", "Source Hub", "Remote Device", "Remote Hub"],
    )
    for record in records:
        source = Cell(record.source.label, record.source.url)
        if not record.remotes:
            table.rows.append([source, Cell(record.source.hub), Cell(""), Cell("")])
        for remote in record.remotes:
            table.rows.append(
                [
                    source,
                    Cell(record.source.hub),
                    Cell(remote.label, remote.url),
                    Cell(remote.hub),
                ]
            )
    table.notes.append(f"{len(records)} mesh source device(s)")
    return table


def issues_tables(groups: list[IssueGroup]) -> list[ReportTable]:
    tables = []
    for group in groups:
        table = ReportTable(group.title, DEVICE_COLUMNS)
        for record in group.devices:
            table.rows.append(_device_row(record))
        table.notes.append(f"{len(group.devices)} device(s)")
        if group.suppressed:
            table.notes.append(f"{group.suppressed} excluded device(s) not shown")
        tables.append(table)
    return tables


def apps_table(snapshot: Snapshot, protocol: str) -> ReportTable:
    usage: dict[str, int] = {}
    for device in snapshot.devices.values():
        for app_id in device.in_use_by:
            usage[app_id] = usage.get(app_id, 0) + 1

    table = ReportTable("Apps", ["App", "Label", "Hub", "Status", "Devices"])
    for app in snapshot.apps.values():
        table.rows.append(
            [
                Cell(app.name, scheme_url(protocol, app.config_url)),
                Cell(app.label),
                Cell(_hub_name(snapshot, app.hub_address)),
                Cell("Disabled" if app.disabled else "Enabled"),
                Cell(str(usage.get(app.id, 0))),
            ]
        )
    table.notes.append(f"{len(snapshot.apps)} app(s)")
    return table


def hubs_table(snapshot: Snapshot, protocol: str) -> ReportTable:
    table = ReportTable(
        "Hubs", ["Hub", "Address", "Platform Version", "Hardware", "Devices"]
    )
    for hub in snapshot.hubs.values():
        table.rows.append(
            [
                Cell(hub.name, scheme_url(protocol, hub.address)),
                Cell(hub.address),
                Cell(hub.platform_version),
                Cell(hub.hardware_version),
                Cell(str(len(snapshot.devices_on(hub.address)))),
            ]
        )
    table.notes.append(f"{len(snapshot.hubs)} hub(s)")
    return table
