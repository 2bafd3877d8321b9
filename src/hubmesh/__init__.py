"""hubmesh - inventory and Hub Mesh health checks across home-automation hubs."""

from __future__ import annotations

from importlib.metadata import version

from .config import ScanningConfig, Settings, get_settings
from .models import App, Device, Hub, IssueCategory, IssueReport, Snapshot
from .storage import Database

__all__ = [
    "App",
    "Database",
    "Device",
    "Hub",
    "IssueCategory",
    "IssueReport",
    "ScanningConfig",
    "Settings",
    "Snapshot",
    "__version__",
    "get_settings",
]

__version__ = version("hubmesh")
