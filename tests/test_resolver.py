from __future__ import annotations

from hubmesh.core.resolver import (
    Dangling,
    NotFound,
    Resolved,
    child_devices,
    lookup,
    mesh_remotes,
    resolve_hierarchy_roots,
    resolve_mesh_sources,
)

A = "192.168.1.10"
B = "192.168.1.11"


def test_lookup_variants(mesh_snapshot, make_device):
    assert isinstance(lookup(mesh_snapshot, f"{A}-1"), Resolved)
    assert lookup(mesh_snapshot, f"{A}-99") == Dangling(f"{A}-99")
    assert lookup(mesh_snapshot, f"{A}-404") == NotFound(f"{A}-404")

    nameless = make_device(A, "50", None)
    mesh_snapshot.devices[nameless.id] = nameless
    assert lookup(mesh_snapshot, nameless.id) == Dangling(nameless.id)


def test_hierarchy_roots_exclude_children(mesh_snapshot):
    ids = [f"{A}-3", f"{A}-2", f"{A}-4", f"{A}-5"]

    assert resolve_hierarchy_roots(mesh_snapshot, ids) == [f"{A}-2", f"{A}-5"]


def test_hierarchy_roots_drop_children_without_their_parent(mesh_snapshot):
    assert resolve_hierarchy_roots(mesh_snapshot, [f"{A}-3", f"{A}-4"]) == []


def test_hierarchy_roots_skip_unknown_ids(mesh_snapshot):
    assert resolve_hierarchy_roots(mesh_snapshot, ["nope", f"{A}-5"]) == [f"{A}-5"]


def test_mesh_sources_map_remotes_to_their_source(mesh_snapshot):
    ids = [f"{B}-7", f"{A}-1", f"{B}-8", f"{A}-2", f"{A}-5"]

    assert resolve_mesh_sources(mesh_snapshot, ids) == [
        f"{A}-1",
        f"{A}-99",
        f"{A}-5",
    ]


def test_mesh_sources_is_idempotent(mesh_snapshot):
    once = resolve_mesh_sources(mesh_snapshot, list(mesh_snapshot.devices))

    assert resolve_mesh_sources(mesh_snapshot, once) == once


def test_mesh_remotes_and_children(mesh_snapshot):
    assert mesh_remotes(mesh_snapshot, f"{A}-1") == [f"{B}-7"]
    assert mesh_remotes(mesh_snapshot, f"{A}-5") == []
    assert mesh_remotes(mesh_snapshot, "missing") == []

    names = [device.name for device in child_devices(mesh_snapshot, f"{A}-2")]
    assert names == ["Fan", "Light"]


def test_resolution_does_not_mutate(mesh_snapshot):
    before = mesh_snapshot.model_dump()

    resolve_mesh_sources(mesh_snapshot, list(mesh_snapshot.devices))
    resolve_hierarchy_roots(mesh_snapshot, list(mesh_snapshot.devices))

    assert mesh_snapshot.model_dump() == before
