from __future__ import annotations

from datetime import datetime, timezone

from hubmesh.core.builder import (
    build_hub_inventory,
    source_id_from_url,
    strip_label_markup,
)
from hubmesh.models import RawApp, RawDeviceNode, RawHubDetails, WirelessProtocol

HUB = "192.168.1.11"
DETAILS = RawHubDetails(name="Upstairs Hub", version="2.3.9.150", model="C-8")


def _node(local_id: str, name: str, **fields) -> RawDeviceNode:
    return RawDeviceNode(id=local_id, name=name, **fields)


def test_hub_record_from_details():
    inventory = build_hub_inventory(HUB, DETAILS, [])

    assert inventory.hub.address == HUB
    assert inventory.hub.name == "Upstairs Hub"
    assert inventory.hub.platform_version == "2.3.9.150"
    assert inventory.hub.hardware_version == "C-8"
    assert inventory.devices == {}


def test_protocol_first_match_wins():
    nodes = [
        _node("1", "Both", zigbee=True, zwave=True),
        _node("2", "ZWave", zwave=True, matter=True),
        _node("3", "Matter", matter=True),
        _node("4", "Virtual"),
    ]
    devices = build_hub_inventory(HUB, DETAILS, nodes).devices

    assert devices[f"{HUB}-1"].protocol is WirelessProtocol.ZIGBEE
    assert devices[f"{HUB}-2"].protocol is WirelessProtocol.ZWAVE
    assert devices[f"{HUB}-3"].protocol is WirelessProtocol.MATTER
    assert devices[f"{HUB}-4"].protocol is None


def test_nested_children_are_linked_both_ways():
    grandchild = _node("12", "Channel 1")
    child = _node("11", "Relay Board", children=[grandchild])
    parent = _node("10", "Multi Relay", parent=True, children=[child])

    inventory = build_hub_inventory(HUB, DETAILS, [parent])
    devices = inventory.devices

    assert list(devices) == [f"{HUB}-12", f"{HUB}-11", f"{HUB}-10"]
    top = devices[f"{HUB}-10"]
    assert top.is_parent_of_children
    assert not top.is_child_of_parent
    assert top.child_device_ids == [f"{HUB}-11"]
    middle = devices[f"{HUB}-11"]
    assert middle.is_parent_of_children and middle.is_child_of_parent
    assert middle.parent_device_id == f"{HUB}-10"
    assert middle.child_device_ids == [f"{HUB}-12"]
    leaf = devices[f"{HUB}-12"]
    assert leaf.parent_device_id == f"{HUB}-11"
    assert leaf.child_device_ids == []
    assert not leaf.is_parent_of_children


def test_parent_id_reported_by_hub_is_kept_for_spliced_children():
    orphan = _node("21", "Child Of Skipped", parent_device_id="20")

    device = build_hub_inventory(HUB, DETAILS, [orphan]).devices[f"{HUB}-21"]

    assert device.is_child_of_parent
    assert device.parent_device_id == f"{HUB}-20"


def test_apps_created_lazily_and_not_overwritten():
    first = RawApp(id="5", name="Rule Machine", label="Night Lights")
    renamed = RawApp(id="5", name="Rule Machine", label="Something Else")
    nodes = [
        _node("1", "Lamp", apps=[first]),
        _node("2", "Sensor", apps=[renamed, RawApp(id="6", name="Notifier")]),
    ]

    inventory = build_hub_inventory(HUB, DETAILS, nodes)

    assert set(inventory.apps) == {f"{HUB}-5", f"{HUB}-6"}
    assert inventory.apps[f"{HUB}-5"].label == "Night Lights"
    assert inventory.apps[f"{HUB}-5"].config_url == f"{HUB}/installedapp/configure/5"
    assert inventory.devices[f"{HUB}-2"].in_use_by == [f"{HUB}-5", f"{HUB}-6"]


def test_app_label_markup_is_stripped():
    assert (
        strip_label_markup("Night Lights <span style='color:red'>(paused)</span>")
        == "Night Lights"
    )
    assert strip_label_markup("Alarm<sup>stopped</sup>") == "Alarm"
    assert strip_label_markup("Plain") == "Plain"


def test_source_id_from_url():
    assert source_id_from_url("http://192.168.1.10/device/edit/45") == "192.168.1.10-45"
    assert source_id_from_url("https://10.0.0.2/device/45/") == "10.0.0.2-45"
    assert source_id_from_url("http://192.168.1.10") is None
    assert source_id_from_url("") is None


def test_remote_devices_feed_reverse_index_without_overwriting():
    nodes = [
        _node(
            "7",
            "Hall Sensor",
            source="Linked",
            remote_url="http://192.168.1.10/device/edit/1",
        ),
        _node(
            "8",
            "Hall Sensor (2)",
            source="Linked",
            remote_url="http://192.168.1.10/device/edit/1",
        ),
    ]

    inventory = build_hub_inventory(HUB, DETAILS, nodes)

    assert inventory.mesh_index_delta == {"192.168.1.10-1": [f"{HUB}-7", f"{HUB}-8"]}
    remote = inventory.devices[f"{HUB}-7"]
    assert remote.is_mesh_linked
    assert remote.source_device_id == "192.168.1.10-1"


def test_mesh_marker_is_case_sensitive():
    node = _node(
        "7", "Sensor", source="linked", remote_url="http://192.168.1.10/device/edit/1"
    )

    inventory = build_hub_inventory(HUB, DETAILS, [node])

    assert not inventory.devices[f"{HUB}-7"].is_mesh_linked
    assert inventory.mesh_index_delta == {}


def test_linked_device_without_url_stays_plain():
    node = _node("7", "Sensor", source="Linked")

    device = build_hub_inventory(HUB, DETAILS, [node]).devices[f"{HUB}-7"]

    assert not device.is_mesh_linked
    assert device.source_device_id is None


def test_mesh_enabled_source_gets_empty_entry():
    nodes = [_node("3", "Front Door", mesh_enabled=True)]

    inventory = build_hub_inventory(HUB, DETAILS, nodes)

    assert inventory.mesh_index_delta == {f"{HUB}-3": []}
    assert inventory.devices[f"{HUB}-3"].mesh_enabled_as_source


def test_battery_and_activity_are_carried_over():
    seen = datetime(2026, 10, 1, 8, 30, tzinfo=timezone.utc)
    node = RawDeviceNode.model_validate(
        {"id": 4, "name": "Door", "battery": "85", "last_activity": seen.isoformat()}
    )

    device = build_hub_inventory(HUB, DETAILS, [node]).devices[f"{HUB}-4"]

    assert device.battery == 85
    assert device.last_activity == seen
    assert device.edit_url == f"{HUB}/device/edit/4"


def test_last_activity_accepts_epoch_millis_and_drops_garbage():
    millis = RawDeviceNode.model_validate(
        {"id": 1, "name": "Door", "last_activity": "1704448800000"}
    )
    garbage = RawDeviceNode.model_validate(
        {"id": 2, "name": "Window", "last_activity": "yesterday-ish"}
    )

    assert millis.last_activity == datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc)
    assert garbage.last_activity is None
