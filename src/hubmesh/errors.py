"""Exception hierarchy for hubmesh."""

from __future__ import annotations


class HubMeshError(Exception):
    """Base class for errors reported to the operator."""


class NoReachableHubsError(HubMeshError):
    """No candidate address validated; the stored inventory was left unchanged."""


class HubFetchError(HubMeshError):
    """A hub-level request failed (details or device list)."""

    def __init__(self, address: str, message: str) -> None:
        super().__init__(f"{address}: {message}")
        self.address = address


class PersistenceError(HubMeshError):
    """The inventory document could not be read or written."""
