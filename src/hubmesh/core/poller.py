from __future__ import annotations

import logging
from typing import Any

import httpx

from hubmesh.config import ScanningConfig
from hubmesh.errors import HubFetchError
from hubmesh.models import RawApp, RawDeviceNode, RawHubDetails

logger = logging.getLogger(__name__)

HUB_DETAILS_PATH = "/hub2/hubData"
DEVICE_LIST_PATH = "/hub2/devicesList"
DEVICE_DETAIL_PATH = "/device/fullJson/{device_id}"


def _battery_from_states(states: object) -> object:
    if not isinstance(states, list):
        return None
    for state in states:
        if isinstance(state, dict) and state.get("name") == "battery":
            return state.get("value")
    return None


def _apps_from_detail(detail: dict[str, Any]) -> list[RawApp]:
    apps = []
    for entry in detail.get("appsUsing") or []:
        apps.append(
            RawApp.model_validate(
                {
                    "id": entry.get("id"),
                    "name": entry.get("name"),
                    "label": entry.get("label"),
                    "disabled": bool(entry.get("disabled", False)),
                }
            )
        )
    return apps


class HubClient:
    """Fetches hub details and the full device tree from one hub."""

    def __init__(
        self, address: str, config: ScanningConfig, client: httpx.Client
    ) -> None:
        self.address = address
        self._config = config
        self._client = client
        self._base_url = f"{config.protocol}://{address}"

    def _get_json(self, path: str) -> Any:
        response = self._client.get(
            f"{self._base_url}{path}", timeout=self._config.request_timeout
        )
        response.raise_for_status()
        return response.json()

    def fetch_hub_details(self) -> RawHubDetails:
        try:
            payload = self._get_json(HUB_DETAILS_PATH)
            return RawHubDetails.model_validate(payload)
        except (httpx.HTTPError, ValueError) as exc:
            raise HubFetchError(self.address, f"hub details: {exc}") from exc

    def fetch_device_tree(self) -> list[RawDeviceNode]:
        try:
            payload = self._get_json(DEVICE_LIST_PATH)
        except (httpx.HTTPError, ValueError) as exc:
            raise HubFetchError(self.address, f"device list: {exc}") from exc

        if not isinstance(payload, dict) or not isinstance(
            payload.get("devices"), list
        ):
            raise HubFetchError(self.address, "device list: unexpected payload")

        return self._collect(payload["devices"], parent_id=None)

    def _collect(
        self, entries: list[dict[str, Any]], parent_id: str | None
    ) -> list[RawDeviceNode]:
        nodes: list[RawDeviceNode] = []
        for entry in entries:
            data = entry.get("data") or {}
            device_id = data.get("id")
            if device_id is None:
                logger.warning("%s: skipping device entry without id", self.address)
                continue

            children = self._collect(entry.get("children") or [], str(device_id))
            node = self._fetch_node(entry, data, children, parent_id)
            if node is None:
                # keep the subtree; the children still name the skipped parent
                nodes.extend(children)
            else:
                nodes.append(node)
        return nodes

    def _fetch_node(
        self,
        entry: dict[str, Any],
        data: dict[str, Any],
        children: list[RawDeviceNode],
        parent_id: str | None,
    ) -> RawDeviceNode | None:
        device_id = data["id"]
        try:
            detail = self._get_json(DEVICE_DETAIL_PATH.format(device_id=device_id))
            if not isinstance(detail, dict):
                raise ValueError("unexpected payload")
            device = detail.get("device") or {}
            return RawDeviceNode.model_validate(
                {
                    "id": device_id,
                    "name": data.get("name"),
                    "disabled": bool(data.get("disabled", False)),
                    "source": data.get("source"),
                    "mesh_enabled": bool(data.get("meshEnabled", False)),
                    "zigbee": bool(data.get("zigbee", False)),
                    "zwave": bool(data.get("zwave", False)),
                    "matter": bool(data.get("matter", False)),
                    "last_activity": data.get("lastActivity"),
                    "battery": _battery_from_states(device.get("currentStates")),
                    "apps": _apps_from_detail(detail),
                    "children": children,
                    "parent": bool(entry.get("parent", False)),
                    "parent_device_id": parent_id,
                    "remote_url": device.get("meshFullUrl"),
                }
            )
        except (httpx.HTTPError, ValueError) as exc:
            # ValidationError is a ValueError
            logger.warning(
                "%s: skipping device %s (%s): %s",
                self.address,
                device_id,
                data.get("name", "?"),
                exc,
            )
            return None

