"""Payloads handed from the hub poller to the inventory builder."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class RawHubDetails(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    name: str
    platform_version: str = Field(default="", alias="version")
    hardware_version: str = Field(default="", alias="model")


class RawApp(BaseModel):
    model_config = {"extra": "ignore"}

    id: str
    name: str
    label: str | None = None
    disabled: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class RawDeviceNode(BaseModel):
    """One device of a hub's device tree, merged with its detail payload."""

    model_config = {"extra": "ignore"}

    id: str
    name: str
    disabled: bool = False
    source: str | None = None
    mesh_enabled: bool = False
    zigbee: bool = False
    zwave: bool = False
    matter: bool = False
    last_activity: datetime | None = None
    battery: int | None = None
    apps: list[RawApp] = Field(default_factory=list)
    children: list[RawDeviceNode] = Field(default_factory=list)
    parent: bool = False
    parent_device_id: str | None = None
    remote_url: str | None = None

    @field_validator("id", "parent_device_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("battery", mode="before")
    @classmethod
    def _coerce_battery(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().rstrip("%")
            return int(float(value)) if value else None
        if isinstance(value, float):
            return int(value)
        return value

    @field_validator("last_activity", mode="before")
    @classmethod
    def _parse_last_activity(cls, value: object) -> object:
        if value in ("", None):
            return None
        if isinstance(value, (int, float)) or (
            isinstance(value, str) and value.strip().isdigit()
        ):
            # epoch milliseconds
            try:
                return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                logger.debug("Ignoring out-of-range last activity %r", value)
                return None
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                logger.debug("Ignoring unparseable last activity %r", value)
                return None
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
