"""Data models for hubmesh."""

from hubmesh.models.config import (
    InventoryConfig,
    NotificationConfig,
    ReportConfig,
    WebhookConfig,
)
from hubmesh.models.inventory import App, Device, Hub, Snapshot, WirelessProtocol
from hubmesh.models.issues import CATEGORY_TITLES, IssueCategory, IssueReport
from hubmesh.models.raw import RawApp, RawDeviceNode, RawHubDetails

__all__ = [
    "App",
    "CATEGORY_TITLES",
    "Device",
    "Hub",
    "InventoryConfig",
    "IssueCategory",
    "IssueReport",
    "NotificationConfig",
    "RawApp",
    "RawDeviceNode",
    "RawHubDetails",
    "ReportConfig",
    "Snapshot",
    "WebhookConfig",
    "WirelessProtocol",
]
