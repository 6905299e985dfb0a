"""Tests for the per-origin link strategies."""

from pathlib import Path
from typing import List, Optional

import pytest

from deplinker.config import LinkerConfig
from deplinker.errors import LinkError
from deplinker.links.changeset import SymlinkEdge
from deplinker.links.strategies import (
    PlanningState,
    plan_authored,
    plan_imported,
    plan_nested,
)
from deplinker.model import (
    Component,
    ComponentId,
    ComponentMap,
    ComponentMapEntry,
    Dependency,
    Dists,
)
from deplinker.workspace.context import WorkspaceContext

A = ComponentId.parse("s/a@1.0.0")
B = ComponentId.parse("s/b@1.0.0")


def _map(*entries: ComponentMapEntry) -> ComponentMap:
    return ComponentMap(entries)


def _attach(component: Component, component_map: ComponentMap) -> Component:
    component.component_map = component_map.get_component(component.id)
    return component


def _pairs(symlinks: List[SymlinkEdge]) -> List[tuple]:
    return [(s.src, s.dest, s.component_id) for s in symlinks]


def _state(tmp_path: Path, component_map: ComponentMap, config: Optional[LinkerConfig] = None):
    context = WorkspaceContext(tmp_path, component_map, config=config)
    return PlanningState.create(component_map, context)


def test_imported_with_dists_inside_component(tmp_path: Path) -> None:
    """One self link and one dependency edge, both attributed to the owner."""
    component_map = _map(
        ComponentMapEntry(id=A, origin="imported", root_dir="components/a"),
        ComponentMapEntry(id=B, origin="imported", root_dir="components/b"),
    )
    a = _attach(Component(id=A, dependencies=[Dependency(id=B)]), component_map)

    changes = plan_imported(a, _state(tmp_path, component_map))

    assert _pairs(changes.symlinks) == [
        ("components/a", "node_modules/@bit/s.a", A),
        ("components/b", "components/a/node_modules/@bit/s.b", A),
    ]
    assert changes.files == []


def test_imported_prefers_written_path(tmp_path: Path) -> None:
    component_map = _map(ComponentMapEntry(id=A, origin="imported", root_dir="components/a"))
    a = _attach(Component(id=A, written_path="moved/a"), component_map)

    changes = plan_imported(a, _state(tmp_path, component_map))

    assert _pairs(changes.symlinks) == [("moved/a", "node_modules/@bit/s.a", A)]


def test_imported_without_any_root_is_an_error(tmp_path: Path) -> None:
    component_map = _map(ComponentMapEntry(id=A, origin="imported"))
    a = _attach(Component(id=A), component_map)

    with pytest.raises(LinkError):
        plan_imported(a, _state(tmp_path, component_map))


def test_imported_with_dists_outside_components(tmp_path: Path) -> None:
    """Packages are mirrored into the dist dir and the slot points at the dist."""
    packages = tmp_path / "components" / "a" / "node_modules"
    for name in ("@bit", "lodash", ".bin"):
        (packages / name).mkdir(parents=True)
    component_map = _map(
        ComponentMapEntry(id=A, origin="imported", root_dir="components/a"),
        ComponentMapEntry(id=B, origin="imported", root_dir="components/b"),
    )
    a = _attach(
        Component(id=A, dependencies=[Dependency(id=B)], dists=Dists(entries=["index.js"])),
        component_map,
    )
    config = LinkerConfig(dists_inside_components=False)

    changes = plan_imported(a, _state(tmp_path, component_map, config))

    assert _pairs(changes.symlinks) == [
        ("components/a/node_modules/lodash", "dist/components/a/node_modules/lodash", None),
        ("dist/components/a", "node_modules/@bit/s.a", A),
        ("components/b", "components/a/node_modules/@bit/s.b", A),
        ("dist/components/b", "dist/components/a/node_modules/@bit/s.b", A),
    ]
    assert [s.for_dist_outside_components_dir for s in changes.symlinks] == [False, True, False, True]


def test_imported_untracked_dependency_is_skipped(tmp_path: Path) -> None:
    """Dependencies missing from the component map are plain packages."""
    component_map = _map(ComponentMapEntry(id=A, origin="imported", root_dir="components/a"))
    a = _attach(Component(id=A, dependencies=[Dependency(id=B)]), component_map)

    changes = plan_imported(a, _state(tmp_path, component_map))

    assert _pairs(changes.symlinks) == [("components/a", "node_modules/@bit/s.a", A)]


def test_nested_links_only_dependencies(tmp_path: Path) -> None:
    component_map = _map(
        ComponentMapEntry(id=A, origin="nested", root_dir="components/.dependencies/s/a/1.0.0"),
        ComponentMapEntry(id=B, origin="nested", root_dir="components/.dependencies/s/b/1.0.0"),
    )
    a = _attach(Component(id=A, dependencies=[Dependency(id=B)]), component_map)
    b = _attach(Component(id=B), component_map)
    state = _state(tmp_path, component_map)

    assert plan_nested(b, state).is_empty()
    assert _pairs(plan_nested(a, state).symlinks) == [
        (
            "components/.dependencies/s/b/1.0.0",
            "components/.dependencies/s/a/1.0.0/node_modules/@bit/s.b",
            A,
        )
    ]


def test_authored_without_scope_produces_nothing(tmp_path: Path) -> None:
    local_id = ComponentId.parse("bar/foo", has_scope=False)
    component_map = _map(ComponentMapEntry(id=local_id, origin="authored", files=["bar/foo.js"]))
    component = _attach(Component(id=local_id), component_map)

    assert plan_authored(component, _state(tmp_path, component_map)).is_empty()


def test_authored_file_by_file(tmp_path: Path) -> None:
    """Supported files get redirects, others symlinks, plus one descriptor."""
    authored_id = ComponentId.parse("s/bar/foo@0.0.1")
    component_map = _map(
        ComponentMapEntry(
            id=authored_id,
            origin="authored",
            files=["bar/foo.js", "bar/foo.png"],
            main_file="bar/foo.js",
        )
    )
    component = _attach(
        Component(id=authored_id, package_dependencies={"react": "^18.0.0"}), component_map
    )

    changes = plan_authored(component, _state(tmp_path, component_map))

    assert len(changes.files) == 1
    redirect = changes.files[0]
    assert redirect.path == "node_modules/@bit/s.bar.foo/bar/foo.js"
    assert redirect.src_path == "bar/foo.js"
    assert redirect.content == "module.exports = require('../../../../bar/foo');"
    assert redirect.component_id == authored_id
    assert _pairs(changes.symlinks) == [
        ("bar/foo.png", "node_modules/@bit/s.bar.foo/bar/foo.png", authored_id)
    ]
    assert len(changes.descriptors) == 1
    descriptor = changes.descriptors[0]
    assert descriptor.path == "node_modules/@bit/s.bar.foo/package.json"
    assert descriptor.data == {
        "name": "@bit/s.bar.foo",
        "version": "0.0.1",
        "main": "bar/foo.js",
        "dependencies": {"react": "^18.0.0"},
    }


def test_authored_points_at_relocated_dist(tmp_path: Path) -> None:
    authored_id = ComponentId.parse("s/bar/foo@0.0.1")
    component_map = _map(
        ComponentMapEntry(id=authored_id, origin="authored", files=["src/bar/foo.ts"])
    )
    component = _attach(
        Component(id=authored_id, dists=Dists(entries=["bar/foo.js"])), component_map
    )
    config = LinkerConfig(dists_inside_components=False, dist_entry="src")

    changes = plan_authored(component, _state(tmp_path, component_map, config))

    assert changes.files[0].path == "node_modules/@bit/s.bar.foo/src/bar/foo.ts"
    assert changes.files[0].content == "module.exports = require('../../../../../dist/bar/foo');"


def test_authored_module_variants_fall_back_to_symlinks(tmp_path: Path) -> None:
    authored_id = ComponentId.parse("s/bar/foo@0.0.1")
    component_map = _map(
        ComponentMapEntry(
            id=authored_id,
            origin="authored",
            files=["bar/foo.cjs", "bar/foo.mjs"],
            main_file="bar/foo.cjs",
        )
    )
    component = _attach(Component(id=authored_id), component_map)

    changes = plan_authored(component, _state(tmp_path, component_map))

    assert changes.files == []
    assert _pairs(changes.symlinks) == [
        ("bar/foo.cjs", "node_modules/@bit/s.bar.foo/bar/foo.cjs", authored_id),
        ("bar/foo.mjs", "node_modules/@bit/s.bar.foo/bar/foo.mjs", authored_id),
    ]
    assert changes.descriptors[0].data["main"] == "bar/foo.cjs"
