from __future__ import annotations

import json
import os

import pytest

from hubmesh.errors import PersistenceError
from hubmesh.models import IssueCategory, Snapshot
from hubmesh.storage import Database


def test_missing_file_loads_empty_snapshot(tmp_path):
    snapshot = Database(tmp_path / "data").load_snapshot()

    assert snapshot.model_dump() == Snapshot().model_dump()


def test_init_creates_empty_document(tmp_path):
    db = Database(tmp_path / "data")

    db.init()

    assert json.loads(db.snapshot_path.read_text())["devices"] == {}


def test_save_then_load_is_identical(tmp_path, mesh_snapshot):
    db = Database(tmp_path)
    mesh_snapshot.config.exclusions = {IssueCategory.LOW_BATTERY: ["x"]}

    db.save_snapshot(mesh_snapshot)
    loaded = db.load_snapshot()

    assert loaded.model_dump() == mesh_snapshot.model_dump()
    assert list(loaded.devices) == list(mesh_snapshot.devices)


def test_load_sorts_by_name(tmp_path, mesh_snapshot):
    db = Database(tmp_path)
    data = mesh_snapshot.model_dump(mode="json")
    data["devices"] = dict(reversed(list(data["devices"].items())))
    db.snapshot_path.write_text(json.dumps(data))

    loaded = db.load_snapshot()

    names = [device.name for device in loaded.devices.values()]
    assert names == sorted(names)


def test_invalid_json_raises_persistence_error(tmp_path):
    db = Database(tmp_path)
    db.snapshot_path.write_text("{not json")

    with pytest.raises(PersistenceError, match="Cannot read"):
        db.load_snapshot()


def test_invalid_document_raises_persistence_error(tmp_path):
    db = Database(tmp_path)
    db.snapshot_path.write_text(json.dumps({"hubs": [], "unknown": 1}))

    with pytest.raises(PersistenceError, match="Invalid inventory"):
        db.load_snapshot()


def test_failed_write_keeps_previous_document(tmp_path, monkeypatch, mesh_snapshot):
    db = Database(tmp_path)
    db.save_snapshot(Snapshot())
    before = db.snapshot_path.read_text()

    def _fail(*_args):
        raise OSError("disk full")

    monkeypatch.setattr("hubmesh.storage.os.replace", _fail)

    with pytest.raises(PersistenceError, match="disk full"):
        db.save_snapshot(mesh_snapshot)

    assert db.snapshot_path.read_text() == before
    assert os.listdir(tmp_path) == ["inventory.json"]


def test_exclusions_add_and_remove(tmp_path):
    db = Database(tmp_path)

    assert db.add_exclusion(IssueCategory.OFFLINE_DEVICES, "192.168.1.10-1")
    assert not db.add_exclusion(IssueCategory.OFFLINE_DEVICES, "192.168.1.10-1")
    assert db.load_snapshot().config.excluded(IssueCategory.OFFLINE_DEVICES) == {
        "192.168.1.10-1"
    }

    assert db.remove_exclusion(IssueCategory.OFFLINE_DEVICES, "192.168.1.10-1")
    assert not db.remove_exclusion(IssueCategory.OFFLINE_DEVICES, "192.168.1.10-1")
    assert db.load_snapshot().config.exclusions == {}
