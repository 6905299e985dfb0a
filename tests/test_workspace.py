"""Tests for workspace context, snapshots and manifest loading."""

import json
from pathlib import Path

import pytest

from deplinker.config import LinkerConfig
from deplinker.errors import ManifestError
from deplinker.model import ComponentId, Dependency, Origin, RelativePath
from deplinker.model.component_map import ComponentMap
from deplinker.workspace.context import SaveDependenciesAnswer, WorkspaceContext
from deplinker.workspace.manifest import load_manifest, parse_manifest
from deplinker.workspace.snapshots import ComponentSnapshot, SnapshotStore

A = ComponentId.parse("s/a@1.0.0")
B = ComponentId.parse("s/b@1.0.0")

MANIFEST = {
    "components": [
        {
            "id": "s/a@1.0.0",
            "origin": "imported",
            "root_dir": "components/a",
            "files": ["index.js"],
            "main_file": "index.js",
            "dependencies": [
                {
                    "id": "s/b@1.0.0",
                    "relative_paths": [
                        {
                            "source_relative_path": "index.js",
                            "destination_relative_path": "index.js",
                            "is_custom_resolve_used": True,
                            "import_source": "utils",
                        }
                    ],
                }
            ],
            "dists": {"entries": ["index.js"], "write_dists_files": False},
            "issues": {"missing_links": {"index.js": ["s/b"]}},
        },
        {"id": "s/b@1.0.0", "origin": "nested", "root_dir": "components/.dependencies/b"},
    ]
}


def test_policy_from_configuration(tmp_path: Path) -> None:
    config = LinkerConfig(components_saved_as_packages=["s/a"])
    context = WorkspaceContext(tmp_path, ComponentMap(), config=config)

    answers = context.should_dependencies_saved_as_components([A, B])

    assert answers == [SaveDependenciesAnswer(A, False), SaveDependenciesAnswer(B, True)]


def test_context_defaults(tmp_path: Path) -> None:
    context = WorkspaceContext(tmp_path, ComponentMap())

    assert context.get_path() == tmp_path.resolve()
    assert context.binding_prefix == "@bit"
    assert context.packages_dir == "node_modules"
    assert context.should_dists_be_inside_components()
    assert context.snapshots.root == tmp_path.resolve() / ".deplinker" / "snapshots"


def test_snapshot_store(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    snapshot = ComponentSnapshot(
        id=A,
        dependencies=[Dependency(B, [RelativePath("index.js", "a.js", True, "utils")])],
        dev_dependencies=[Dependency(ComponentId.parse("s/c"))],
    )

    path = store.save(snapshot)

    assert path.name == "s.a@1.0.0.json"
    assert store.load(A) == snapshot
    assert store.load(B) is None


def test_malformed_snapshot(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path)
    store.path_for(A).write_text('{"dependencies": []}', encoding="utf-8")

    with pytest.raises(ManifestError):
        store.load(A)

    store.path_for(A).write_text('{"id": "s/a@1.0.0", "dependencies": [{}]}', encoding="utf-8")
    with pytest.raises(ManifestError):
        store.load(A)


def test_parse_manifest() -> None:
    component_map, components = parse_manifest(MANIFEST)

    assert [entry.id for entry in component_map] == [A, B]
    assert component_map.get_component(B).get_origin() is Origin.NESTED
    a = components[0]
    assert a.dependencies[0].id == B
    assert a.get_custom_resolved_data() == {"utils": B}
    assert a.dists.entries == ["index.js"]
    assert not a.dists.write_dists_files
    assert a.issues.missing_links == {"index.js": [ComponentId.parse("s/b")]}
    assert a.binding_prefix == "@bit"


def test_unknown_origin_is_kept_until_linking() -> None:
    component_map, _ = parse_manifest({"components": [{"id": "s/a", "origin": "linked"}]})

    assert component_map.get_component(ComponentId.parse("s/a")).origin == "linked"


@pytest.mark.parametrize(
    "data",
    [
        {"components": [{"id": "", "origin": "imported"}]},
        {"components": [{"id": "s/a"}]},
        {"components": [{"id": "s/a", "origin": "imported", "dependencies": [{"id": " "}]}]},
        {"components": "nope"},
    ],
)
def test_invalid_manifest(data) -> None:
    with pytest.raises(ManifestError):
        parse_manifest(data)


def test_load_manifest_file(tmp_path: Path) -> None:
    manifest_file = tmp_path / "workspace.json"
    manifest_file.write_text(json.dumps(MANIFEST), encoding="utf-8")

    component_map, components = load_manifest(manifest_file)

    assert len(component_map) == 2
    assert [c.id for c in components] == [A, B]

    manifest_file.write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(manifest_file)
