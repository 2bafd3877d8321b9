from __future__ import annotations

import csv
import io

from hubmesh.core import classify
from hubmesh.models import App, IssueCategory
from hubmesh.reports import (
    MISSING,
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
    render_csv,
    render_html,
)

A = "192.168.1.10"
B = "192.168.1.11"


def _texts(table):
    return [[cell.text for cell in row] for row in table.rows]


def test_device_record_resolves_relationships(mesh_snapshot):
    record = device_record(mesh_snapshot, f"{B}-7", "http")

    assert record.url == f"http://{B}/device/edit/7"
    assert record.hub == "Upstairs Hub"
    assert record.label == "Hall Sensor (linked)"
    assert record.source.text == "Hall Sensor"
    assert record.source.url == f"http://{A}/device/edit/1"


def test_dangling_source_is_shown_as_missing(mesh_snapshot):
    record = device_record(mesh_snapshot, f"{B}-8", "https")

    assert record.source.text == f"{A}-99 {MISSING}"
    assert record.source.url == ""
    assert record.url.startswith("https://")


def test_missing_app_and_hub_are_marked(mesh_snapshot, make_device):
    device = make_device("10.0.0.9", "1", "Shed Light", in_use_by=["10.0.0.9-4"])
    mesh_snapshot.devices[device.id] = device

    record = device_record(mesh_snapshot, device.id, "http")

    assert record.hub == f"10.0.0.9 {MISSING}"
    assert [cell.text for cell in record.in_use_by] == [f"10.0.0.9-4 {MISSING}"]


def test_devices_table_lists_apps(mesh_snapshot):
    mesh_snapshot.apps[f"{A}-5"] = App(
        id=f"{A}-5",
        local_id="5",
        hub_address=A,
        name="Rule Machine",
        label="Night Lights",
        config_url=f"{A}/installedapp/configure/5",
    )
    fan = mesh_snapshot.devices[f"{A}-3"]
    mesh_snapshot.devices[fan.id] = fan.model_copy(update={"in_use_by": [f"{A}-5"]})

    table = devices_table(device_records(mesh_snapshot, [fan.id], "http"))

    assert table.columns[-1] == "In Use By"
    assert table.rows[0][-1].text == "Night Lights"
    assert table.rows[0][6].text == "Fan Controller"


def test_hierarchy_nests_children(mesh_snapshot):
    records = hierarchy_records(mesh_snapshot, [f"{A}-3", f"{A}-2"], "http")
    table = hierarchy_table(records)

    assert [row[0] for row in _texts(table)] == [
        "Fan Controller",
        "└── Fan",
        "└── Light",
    ]


def test_mesh_table_rows(mesh_snapshot):
    records = mesh_records(mesh_snapshot, list(mesh_snapshot.devices), "http")
    rows = _texts(mesh_table(records))

    assert ["Hall Sensor", "Main Hub", "Hall Sensor (linked)", "Upstairs Hub"] in rows
    assert [
        f"{A}-99 {MISSING}",
        "",
        "Porch Switch (linked)",
        "Upstairs Hub",
    ] in rows
    assert ["Garage Door", "Main Hub", "", ""] in rows


def test_issue_tables_follow_category_order_and_note_exclusions(mesh_snapshot):
    mesh_snapshot.config.exclusions = {
        IssueCategory.MESH_NO_REMOTE_DEVICE: [f"{A}-5"]
    }
    report = classify(mesh_snapshot, list(mesh_snapshot.devices))

    tables = issues_tables(issue_groups(mesh_snapshot, report, "http"))

    assert [table.title for table in tables][:3] == [
        "Low Battery",
        "Inactive Devices",
        "Offline Devices",
    ]
    orphaned, _, no_remote = tables[3:]
    assert _texts(orphaned)[0][0] == "Porch Switch (linked)"
    assert no_remote.rows == []
    assert "1 excluded device(s) not shown" in no_remote.notes


def test_hubs_and_apps_tables(mesh_snapshot):
    hubs = _texts(hubs_table(mesh_snapshot, "http"))
    apps = apps_table(mesh_snapshot, "http")

    assert hubs[0][:2] == ["Main Hub", A]
    assert hubs[0][-1] == "5"
    assert hubs[1][-1] == "2"
    assert apps.rows == []


def test_csv_adds_url_columns(mesh_snapshot):
    table = devices_table(device_records(mesh_snapshot, [f"{A}-1"], "http"))

    rows = list(csv.reader(io.StringIO(render_csv([table]))))

    assert rows[0][:3] == ["Device", "Device URL", "Hub"]
    assert rows[1][:2] == ["Hall Sensor", f"http://{A}/device/edit/1"]


def test_csv_sections_for_several_tables(mesh_snapshot):
    report = classify(mesh_snapshot, list(mesh_snapshot.devices))
    tables = issues_tables(issue_groups(mesh_snapshot, report, "http"))

    rows = list(csv.reader(io.StringIO(render_csv(tables))))

    assert rows[0][0] == "Section"
    sections = {row[0] for row in rows if row[0] != "Section"}
    assert sections == {
        "Hub Mesh: Orphaned Remote Devices",
        "Hub Mesh: Source Without Remote Devices",
    }


def test_html_escapes_and_links(mesh_snapshot, make_device):
    device = make_device(A, "40", "<script>alert(1)</script>")
    mesh_snapshot.devices[device.id] = device
    table = devices_table(device_records(mesh_snapshot, [device.id], "http"))

    html = render_html("Devices", [table])

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert f'href="http://{A}/device/edit/40"' in html
    assert "1 device(s)" in html
