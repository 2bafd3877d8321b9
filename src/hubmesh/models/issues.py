"""Issue categories and the per-pass classification result."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IssueCategory(str, Enum):
    """Health-check categories, in report order."""

    LOW_BATTERY = "lowBattery"
    INACTIVE_DEVICES = "inactiveDevices"
    OFFLINE_DEVICES = "offlineDevices"
    MESH_ORPHANED_DEVICES = "hubMesh_orphanedDevices"
    MESH_DISABLED_ON_SOURCE = "hubMesh_disabledOnSourceDevice"
    MESH_NO_REMOTE_DEVICE = "hubMesh_noRemoteDevice"


CATEGORY_TITLES: dict[IssueCategory, str] = {
    IssueCategory.LOW_BATTERY: "Low Battery",
    IssueCategory.INACTIVE_DEVICES: "Inactive Devices",
    IssueCategory.OFFLINE_DEVICES: "Offline Devices",
    IssueCategory.MESH_ORPHANED_DEVICES: "Hub Mesh: Orphaned Remote Devices",
    IssueCategory.MESH_DISABLED_ON_SOURCE: "Hub Mesh: Sharing Disabled on Source",
    IssueCategory.MESH_NO_REMOTE_DEVICE: "Hub Mesh: Source Without Remote Devices",
}


def _zero_counts() -> dict[IssueCategory, int]:
    return {category: 0 for category in IssueCategory}


@dataclass
class IssueReport:
    """Devices flagged per category plus counts of suppressed (excluded) hits."""

    issues: dict[str, set[IssueCategory]] = field(default_factory=dict)
    suppressed: dict[IssueCategory, int] = field(default_factory=_zero_counts)

    def devices_in(self, category: IssueCategory) -> list[str]:
        return [
            device_id
            for device_id, categories in self.issues.items()
            if category in categories
        ]

    def triggered_categories(self) -> list[IssueCategory]:
        return [category for category in IssueCategory if self.devices_in(category)]

    @property
    def total(self) -> int:
        return sum(len(categories) for categories in self.issues.values())
