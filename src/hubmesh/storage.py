from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from hubmesh.errors import PersistenceError
from hubmesh.models import IssueCategory, Snapshot

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = "inventory.json"


class Database:
    """The single JSON document holding hubs, devices, apps and config."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._snapshot_path = data_dir / SNAPSHOT_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def load_snapshot(self) -> Snapshot:
        if not self._snapshot_path.exists():
            return Snapshot()

        try:
            with self._snapshot_path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(
                f"Cannot read inventory file: {self._snapshot_path}\n{exc}"
            ) from exc

        try:
            snapshot = Snapshot.model_validate(data or {})
        except ValidationError as exc:
            raise PersistenceError(
                f"Invalid inventory file: {self._snapshot_path}\n{exc}"
            ) from exc

        snapshot.sort_by_name()
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Write the whole document to a temp file, then swap it into place."""
        tmp_name: str | None = None
        try:
            self.ensure_dirs()
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._data_dir,
                prefix=f".{SNAPSHOT_FILE}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                json.dump(snapshot.model_dump(mode="json"), handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._snapshot_path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(
                f"Cannot write inventory file: {self._snapshot_path}\n{exc}"
            ) from exc
        logger.debug("Saved inventory to %s", self._snapshot_path)

    def add_exclusion(self, category: IssueCategory, device_id: str) -> bool:
        snapshot = self.load_snapshot()
        excluded = snapshot.config.exclusions.setdefault(category, [])
        if device_id in excluded:
            return False
        excluded.append(device_id)
        self.save_snapshot(snapshot)
        return True

    def remove_exclusion(self, category: IssueCategory, device_id: str) -> bool:
        snapshot = self.load_snapshot()
        excluded = snapshot.config.exclusions.get(category, [])
        if device_id not in excluded:
            return False
        excluded.remove(device_id)
        if not excluded:
            del snapshot.config.exclusions[category]
        self.save_snapshot(snapshot)
        return True

    def init(self) -> None:
        self.ensure_dirs()
        if not self._snapshot_path.exists():
            self.save_snapshot(Snapshot())
