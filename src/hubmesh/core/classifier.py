from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone

from hubmesh.core.resolver import Resolved, lookup, mesh_remotes, resolve_mesh_sources
from hubmesh.models import Device, IssueCategory, IssueReport, Snapshot

logger = logging.getLogger(__name__)

OFFLINE_PREFIX = "offline"


def is_offline(device: Device) -> bool:
    return bool(device.name) and device.name.lower().startswith(OFFLINE_PREFIX)


def is_low_battery(device: Device, threshold: int) -> bool:
    return (
        device.battery is not None
        and not device.is_mesh_linked
        and device.battery < threshold
    )


def is_inactive(device: Device, threshold_minutes: int, now: datetime) -> bool:
    if device.protocol is None or device.last_activity is None:
        return False
    return now - device.last_activity > timedelta(minutes=threshold_minutes)


class _Classification:
    def __init__(self, exclusions: Mapping[IssueCategory, Iterable[str]]) -> None:
        self.report = IssueReport()
        self._excluded = {
            category: set(exclusions.get(category, ())) for category in IssueCategory
        }
        self._seen: set[tuple[str, IssueCategory]] = set()

    def flag(self, device_id: str, category: IssueCategory) -> None:
        key = (device_id, category)
        if key in self._seen:
            return
        self._seen.add(key)

        if device_id in self._excluded[category]:
            self.report.suppressed[category] += 1
            return
        self.report.issues.setdefault(device_id, set()).add(category)


def classify(
    snapshot: Snapshot,
    device_ids: Iterable[str],
    *,
    exclusions: Mapping[IssueCategory, Iterable[str]] | None = None,
    now: datetime | None = None,
) -> IssueReport:
    """Run the health checks over ``device_ids``.

    Thresholds and, unless given, exclusions come from ``snapshot.config``.
    Ids missing from the snapshot are skipped. Mesh rules also reach the
    remotes of any source resolved from the input, so devices outside
    ``device_ids`` can be flagged through their mesh relationship.
    """
    config = snapshot.config
    now = now or datetime.now(timezone.utc)
    run = _Classification(config.exclusions if exclusions is None else exclusions)

    present = [d for d in dict.fromkeys(device_ids) if d in snapshot.devices]
    for device_id in present:
        device = snapshot.devices[device_id]
        if is_offline(device):
            run.flag(device_id, IssueCategory.OFFLINE_DEVICES)
        if is_low_battery(device, config.low_battery_charge_threshold):
            run.flag(device_id, IssueCategory.LOW_BATTERY)
        if is_inactive(device, config.inactivity_threshold_minutes, now):
            run.flag(device_id, IssueCategory.INACTIVE_DEVICES)

    for source_id in resolve_mesh_sources(snapshot, present):
        linked = mesh_remotes(snapshot, source_id)
        remotes = [remote_id for remote_id in linked if remote_id in snapshot.devices]
        source = lookup(snapshot, source_id)

        if isinstance(source, Resolved):
            if is_offline(source.device):
                run.flag(source_id, IssueCategory.OFFLINE_DEVICES)
            if not linked:
                run.flag(source_id, IssueCategory.MESH_NO_REMOTE_DEVICE)
            elif not source.device.mesh_enabled_as_source:
                run.flag(source_id, IssueCategory.MESH_DISABLED_ON_SOURCE)
        else:
            for remote_id in remotes:
                run.flag(remote_id, IssueCategory.MESH_ORPHANED_DEVICES)

        for remote_id in remotes:
            if is_offline(snapshot.devices[remote_id]):
                run.flag(remote_id, IssueCategory.OFFLINE_DEVICES)

    logger.debug(
        "Classified %d devices: %d issues, %d suppressed",
        len(present),
        run.report.total,
        sum(run.report.suppressed.values()),
    )
    return run.report
