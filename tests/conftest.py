from __future__ import annotations

from typing import Any

import pytest

from hubmesh.config import get_settings
from hubmesh.models import Device, Hub, Snapshot


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("HUBMESH_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _device(hub: str, local_id: str, name: str | None, **fields: Any) -> Device:
    return Device(
        id=f"{hub}-{local_id}",
        local_id=local_id,
        hub_address=hub,
        name=name,
        edit_url=f"{hub}/device/edit/{local_id}",
        **fields,
    )


@pytest.fixture
def make_device():
    return _device


@pytest.fixture
def mesh_snapshot() -> Snapshot:
    """Two hubs: a shared sensor, a shared switch whose source was deleted,
    a parent with two children, and a mesh source nobody links to."""
    hub_a = "192.168.1.10"
    hub_b = "192.168.1.11"
    devices = [
        _device(hub_a, "1", "Hall Sensor", mesh_enabled_as_source=True),
        _device(
            hub_b,
            "7",
            "Hall Sensor",
            is_mesh_linked=True,
            source_device_id=f"{hub_a}-1",
        ),
        _device(
            hub_b,
            "8",
            "Porch Switch",
            is_mesh_linked=True,
            source_device_id=f"{hub_a}-99",
        ),
        _device(
            hub_a,
            "2",
            "Fan Controller",
            is_parent_of_children=True,
            child_device_ids=[f"{hub_a}-3", f"{hub_a}-4"],
        ),
        _device(
            hub_a, "3", "Fan", is_child_of_parent=True, parent_device_id=f"{hub_a}-2"
        ),
        _device(
            hub_a, "4", "Light", is_child_of_parent=True, parent_device_id=f"{hub_a}-2"
        ),
        _device(hub_a, "5", "Garage Door", mesh_enabled_as_source=True),
    ]
    snapshot = Snapshot(
        hubs={
            hub_a: Hub(address=hub_a, name="Main Hub"),
            hub_b: Hub(address=hub_b, name="Upstairs Hub"),
        },
        devices={device.id: device for device in devices},
        mesh_reverse_index={
            f"{hub_a}-1": [f"{hub_b}-7"],
            f"{hub_a}-99": [f"{hub_b}-8"],
            f"{hub_a}-5": [],
        },
    )
    snapshot.sort_by_name()
    return snapshot
