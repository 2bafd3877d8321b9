from __future__ import annotations

from .builder import HubInventory, build_hub_inventory
from .classifier import classify
from .notifier import NotificationResult, notify_issues
from .poller import HubClient
from .resolver import (
    Dangling,
    NotFound,
    Resolved,
    lookup,
    mesh_remotes,
    resolve_hierarchy_roots,
    resolve_mesh_sources,
)
from .scanner import ScanOutcome, merge_inventories, run_new_scan
from .validator import parse_address, parse_address_list, validate

__all__ = [
    "Dangling",
    "HubClient",
    "HubInventory",
    "NotFound",
    "NotificationResult",
    "Resolved",
    "ScanOutcome",
    "build_hub_inventory",
    "classify",
    "lookup",
    "merge_inventories",
    "mesh_remotes",
    "notify_issues",
    "parse_address",
    "parse_address_list",
    "resolve_hierarchy_roots",
    "resolve_mesh_sources",
    "run_new_scan",
    "validate",
]
