from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from hubmesh.models import (
    App,
    Device,
    Hub,
    RawApp,
    RawDeviceNode,
    RawHubDetails,
    WirelessProtocol,
)

logger = logging.getLogger(__name__)

DEFAULT_MESH_MARKER = "Linked"

_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
# paused/stopped apps carry an HTML suffix on their label
_LABEL_MARKUP_SUFFIX = re.compile(
    r"\s*<(span|sup|font|b|i)\b.*$", re.IGNORECASE | re.DOTALL
)


@dataclass
class HubInventory:
    """Everything built from one hub's poll."""

    hub: Hub
    devices: dict[str, Device] = field(default_factory=dict)
    apps: dict[str, App] = field(default_factory=dict)
    mesh_index_delta: dict[str, list[str]] = field(default_factory=dict)


def global_id(hub_address: str, local_id: str) -> str:
    return f"{hub_address}-{local_id}"


def device_edit_url(hub_address: str, local_id: str) -> str:
    return f"{hub_address}/device/edit/{local_id}"


def app_config_url(hub_address: str, local_id: str) -> str:
    return f"{hub_address}/installedapp/configure/{local_id}"


def strip_label_markup(label: str) -> str:
    return _LABEL_MARKUP_SUFFIX.sub("", label).strip()


def source_id_from_url(url: str) -> str | None:
    """Derive ``{hub}-{local id}`` from a remote device URL.

    ``http://192.168.1.20/device/edit/45`` -> ``192.168.1.20-45``.
    """
    path = _SCHEME_PREFIX.sub("", url.strip()).strip("/")
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        return None
    return global_id(segments[0], segments[-1])


def detect_protocol(node: RawDeviceNode) -> WirelessProtocol | None:
    if node.zigbee:
        return WirelessProtocol.ZIGBEE
    if node.zwave:
        return WirelessProtocol.ZWAVE
    if node.matter:
        return WirelessProtocol.MATTER
    return None


class _TreeWalker:
    def __init__(self, inventory: HubInventory, mesh_marker: str) -> None:
        self._inventory = inventory
        self._address = inventory.hub.address
        self._mesh_marker = mesh_marker

    def walk(self, node: RawDeviceNode, parent_local_id: str | None) -> str:
        device_id = global_id(self._address, node.id)

        # children first so the parent's child list is complete
        child_ids = [self.walk(child, node.id) for child in node.children]

        parent_local = node.parent_device_id or parent_local_id
        is_parent = bool(child_ids) or node.parent
        source_device_id = self._mesh_source(node, device_id)

        if node.mesh_enabled:
            self._inventory.mesh_index_delta.setdefault(device_id, [])

        self._inventory.devices[device_id] = Device(
            id=device_id,
            local_id=node.id,
            hub_address=self._address,
            name=node.name,
            edit_url=device_edit_url(self._address, node.id),
            disabled=node.disabled,
            last_activity=node.last_activity,
            protocol=detect_protocol(node),
            battery=node.battery,
            in_use_by=self._register_apps(node.apps),
            is_parent_of_children=is_parent,
            is_child_of_parent=parent_local is not None,
            is_mesh_linked=source_device_id is not None,
            mesh_enabled_as_source=node.mesh_enabled,
            source_device_id=source_device_id,
            child_device_ids=child_ids if is_parent else [],
            parent_device_id=(
                global_id(self._address, parent_local) if parent_local else None
            ),
        )
        return device_id

    def _mesh_source(self, node: RawDeviceNode, device_id: str) -> str | None:
        if node.source != self._mesh_marker:
            return None

        source_id = source_id_from_url(node.remote_url or "")
        if source_id is None:
            logger.warning(
                "%s: linked device %s (%s) has no usable remote URL: %r",
                self._address,
                node.id,
                node.name,
                node.remote_url,
            )
            return None

        self._inventory.mesh_index_delta.setdefault(source_id, []).append(device_id)
        return source_id

    def _register_apps(self, raw_apps: list[RawApp]) -> list[str]:
        app_ids: list[str] = []
        for raw in raw_apps:
            app_id = global_id(self._address, raw.id)
            if app_id not in self._inventory.apps:
                self._inventory.apps[app_id] = App(
                    id=app_id,
                    local_id=raw.id,
                    hub_address=self._address,
                    name=raw.name,
                    label=strip_label_markup(raw.label or ""),
                    disabled=raw.disabled,
                    config_url=app_config_url(self._address, raw.id),
                )
            if app_id not in app_ids:
                app_ids.append(app_id)
        return app_ids


def build_hub_inventory(
    address: str,
    details: RawHubDetails,
    nodes: list[RawDeviceNode],
    mesh_marker: str = DEFAULT_MESH_MARKER,
) -> HubInventory:
    """Normalize one hub's payloads into Hub, Device and App records."""
    inventory = HubInventory(
        hub=Hub(
            address=address,
            name=details.name,
            platform_version=details.platform_version,
            hardware_version=details.hardware_version,
        )
    )
    walker = _TreeWalker(inventory, mesh_marker)
    for node in nodes:
        walker.walk(node, None)

    logger.debug(
        "%s: built %d devices, %d apps, %d mesh sources",
        address,
        len(inventory.devices),
        len(inventory.apps),
        len(inventory.mesh_index_delta),
    )
    return inventory
