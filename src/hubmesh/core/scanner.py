from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from hubmesh.config import ScanningConfig
from hubmesh.core.builder import HubInventory, build_hub_inventory
from hubmesh.core.poller import HubClient
from hubmesh.core.validator import Probe, probe_port, validate
from hubmesh.errors import HubFetchError, NoReachableHubsError
from hubmesh.models import Snapshot

logger = logging.getLogger(__name__)


@dataclass
class ScanOutcome:
    valid: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    scanned: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    device_count: int = 0


def _clear(snapshot: Snapshot) -> None:
    snapshot.hubs.clear()
    snapshot.devices.clear()
    snapshot.apps.clear()
    snapshot.mesh_reverse_index.clear()


def _drop_hubs(snapshot: Snapshot, addresses: set[str]) -> None:
    removed = {
        device_id
        for device_id, device in snapshot.devices.items()
        if device.hub_address in addresses
    }
    for address in addresses:
        snapshot.hubs.pop(address, None)
    for device_id in removed:
        del snapshot.devices[device_id]
    snapshot.apps = {
        app_id: app
        for app_id, app in snapshot.apps.items()
        if app.hub_address not in addresses
    }

    index: dict[str, list[str]] = {}
    for source_id, remotes in snapshot.mesh_reverse_index.items():
        kept = [remote_id for remote_id in remotes if remote_id not in removed]
        if kept or (source_id not in removed and source_id in snapshot.devices):
            index[source_id] = kept
    snapshot.mesh_reverse_index = index


def merge_inventories(
    snapshot: Snapshot, inventories: Iterable[HubInventory], replace_all: bool
) -> None:
    """Write freshly built hubs into ``snapshot``.

    With ``replace_all`` every hub is wiped first; otherwise only the hubs
    being written are replaced and all other hubs are left untouched.
    """
    inventories = list(inventories)
    if replace_all:
        _clear(snapshot)
    else:
        _drop_hubs(snapshot, {inv.hub.address for inv in inventories})

    for inventory in inventories:
        snapshot.hubs[inventory.hub.address] = inventory.hub
        snapshot.devices.update(inventory.devices)
        for app_id, app in inventory.apps.items():
            snapshot.apps.setdefault(app_id, app)
        for source_id, remotes in inventory.mesh_index_delta.items():
            entry = snapshot.mesh_reverse_index.setdefault(source_id, [])
            entry.extend(remote_id for remote_id in remotes if remote_id not in entry)


def poll_hub(
    address: str, config: ScanningConfig, client: httpx.Client
) -> HubInventory:
    hub = HubClient(address, config, client)
    details = hub.fetch_hub_details()
    nodes = hub.fetch_device_tree()
    return build_hub_inventory(address, details, nodes, config.mesh_marker)


def run_new_scan(
    snapshot: Snapshot,
    candidates: Iterable[str],
    config: ScanningConfig,
    client: httpx.Client,
    probe: Probe = probe_port,
) -> ScanOutcome:
    """Validate, poll and merge hubs into ``snapshot`` one at a time.

    Raises NoReachableHubsError, leaving ``snapshot`` untouched, when no
    candidate validates.
    """
    outcome = ScanOutcome()
    for candidate in candidates:
        address = validate(candidate, config.ports, config.probe_timeout, probe)
        if address is None:
            logger.warning("Skipping %s: not a reachable hub address", candidate)
            outcome.invalid.append(candidate)
        elif address not in outcome.valid:
            outcome.valid.append(address)

    if not outcome.valid:
        raise NoReachableHubsError(
            "No reachable hub addresses; the stored inventory was not changed"
        )

    inventories: list[HubInventory] = []
    for address in outcome.valid:
        logger.info("Scanning hub %s", address)
        try:
            inventory = poll_hub(address, config, client)
        except HubFetchError as exc:
            logger.warning("Skipping hub %s", exc)
            outcome.failed.append(address)
            continue
        inventories.append(inventory)
        outcome.scanned.append(address)
        outcome.device_count += len(inventory.devices)

    merge_inventories(snapshot, inventories, replace_all=config.replace_mode == "all")
    snapshot.sort_by_name()
    snapshot.config.last_updated = datetime.now(timezone.utc)
    return outcome
