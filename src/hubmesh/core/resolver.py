"""Parent/child and Hub Mesh relationship resolution over a snapshot.

Every function here is a pure read of the snapshot. Mesh sources are the keys
of ``Snapshot.mesh_reverse_index``; a key may name a device that no longer
exists (its remotes are then orphans), which ``lookup`` reports as
``Dangling`` rather than ``NotFound``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from hubmesh.models import Device, Snapshot


@dataclass(frozen=True)
class Resolved:
    device: Device


@dataclass(frozen=True)
class Dangling:
    device_id: str


@dataclass(frozen=True)
class NotFound:
    device_id: str


Lookup = Resolved | Dangling | NotFound


def _is_referenced(snapshot: Snapshot, device_id: str) -> bool:
    if device_id in snapshot.mesh_reverse_index:
        return True
    return any(device_id in remotes for remotes in snapshot.mesh_reverse_index.values())


def lookup(snapshot: Snapshot, device_id: str) -> Lookup:
    device = snapshot.devices.get(device_id)
    if device is not None and device.name:
        return Resolved(device)
    if device is not None or _is_referenced(snapshot, device_id):
        return Dangling(device_id)
    return NotFound(device_id)


def is_mesh_source(snapshot: Snapshot, device_id: str) -> bool:
    return device_id in snapshot.mesh_reverse_index


def resolve_hierarchy_roots(snapshot: Snapshot, device_ids: Iterable[str]) -> list[str]:
    """Top-level devices for the parent/child view.

    Child devices are rendered under their parent and never promoted, even when
    their parent is not part of ``device_ids``.
    """
    roots: list[str] = []
    seen: set[str] = set()
    for device_id in device_ids:
        device = snapshot.devices.get(device_id)
        if device is None or device.is_child_of_parent or device_id in seen:
            continue
        seen.add(device_id)
        roots.append(device_id)
    return roots


def resolve_mesh_sources(snapshot: Snapshot, device_ids: Iterable[str]) -> list[str]:
    """Map any mix of mesh source/remote ids onto their source roots.

    Order of first appearance is kept and duplicates collapse. Ids that are
    neither a source nor a remote are dropped.
    """
    sources: list[str] = []
    seen: set[str] = set()
    for device_id in device_ids:
        if is_mesh_source(snapshot, device_id):
            root: str | None = device_id
        else:
            device = snapshot.devices.get(device_id)
            root = device.source_device_id if device and device.is_mesh_linked else None

        if root is not None and root not in seen:
            seen.add(root)
            sources.append(root)
    return sources


def mesh_remotes(snapshot: Snapshot, source_id: str) -> list[str]:
    return list(snapshot.mesh_reverse_index.get(source_id, []))


def child_devices(snapshot: Snapshot, device_id: str) -> list[Device]:
    device = snapshot.devices.get(device_id)
    if device is None:
        return []
    return [
        snapshot.devices[child_id]
        for child_id in device.child_device_ids
        if child_id in snapshot.devices
    ]
