from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .config import InventoryConfig


class WirelessProtocol(str, Enum):
    ZIGBEE = "Zigbee"
    ZWAVE = "ZWave"
    MATTER = "Matter"


class Hub(BaseModel):
    model_config = {"extra": "forbid"}

    address: str
    name: str
    platform_version: str = ""
    hardware_version: str = ""


class App(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    local_id: str
    hub_address: str
    name: str
    label: str = ""
    disabled: bool = False
    config_url: str

    @property
    def display_name(self) -> str:
        return self.label or self.name


class Device(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    local_id: str
    hub_address: str
    # None marks a dangling reference (entity no longer present)
    name: str | None = None
    edit_url: str = ""
    disabled: bool = False
    last_activity: datetime | None = None
    protocol: WirelessProtocol | None = None
    battery: int | None = None
    in_use_by: list[str] = Field(default_factory=list)
    is_parent_of_children: bool = False
    is_child_of_parent: bool = False
    is_mesh_linked: bool = False
    mesh_enabled_as_source: bool = False
    source_device_id: str | None = None
    child_device_ids: list[str] = Field(default_factory=list)
    parent_device_id: str | None = None


class Snapshot(BaseModel):
    """The whole persisted inventory document."""

    model_config = {"extra": "forbid"}

    hubs: dict[str, Hub] = Field(default_factory=dict)
    devices: dict[str, Device] = Field(default_factory=dict)
    apps: dict[str, App] = Field(default_factory=dict)
    mesh_reverse_index: dict[str, list[str]] = Field(default_factory=dict)
    config: InventoryConfig = Field(default_factory=InventoryConfig)

    def sort_by_name(self) -> None:
        """Re-order hubs, devices and apps by name (ordinal, case-sensitive)."""
        self.hubs = dict(sorted(self.hubs.items(), key=lambda item: item[1].name))
        self.devices = dict(
            sorted(self.devices.items(), key=lambda item: item[1].name or "")
        )
        self.apps = dict(sorted(self.apps.items(), key=lambda item: item[1].name))

    def devices_on(self, hub_address: str) -> list[Device]:
        return [d for d in self.devices.values() if d.hub_address == hub_address]
