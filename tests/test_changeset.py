"""Tests for planned filesystem mutations and their application."""

import json
import os
from pathlib import Path

from deplinker.links.changeset import (
    ChangeSet,
    GeneratedFileEdge,
    PackageDescriptorEdge,
    SymlinkEdge,
)
from deplinker.model.ids import ComponentId

A = ComponentId.parse("s/a@1.0.0")


def _planned() -> ChangeSet:
    changes = ChangeSet()
    changes.add_symlink(SymlinkEdge(src="components/a", dest="node_modules/@bit/s.a", component_id=A))
    changes.add_file(
        GeneratedFileEdge(
            path="node_modules/@bit/s.b/bar/foo.js",
            content="module.exports = require('../../../../bar/foo');",
            src_path="bar/foo.js",
            component_id=A,
        )
    )
    changes.add_descriptor(
        PackageDescriptorEdge(path="node_modules/@bit/s.b/package.json", data={"name": "@bit/s.b"})
    )
    return changes


def test_add_base_path_prefixes_relative_paths_only(tmp_path: Path) -> None:
    changes = _planned()
    absolute = SymlinkEdge(src=str(tmp_path / "x"), dest="node_modules/x")
    changes.add_symlink(absolute)

    changes.add_base_path(tmp_path)

    assert changes.symlinks[0].src == os.path.join(str(tmp_path), "components/a")
    assert changes.symlinks[0].dest == os.path.join(str(tmp_path), "node_modules/@bit/s.a")
    assert changes.files[0].path == os.path.join(str(tmp_path), "node_modules/@bit/s.b/bar/foo.js")
    assert changes.descriptors[0].path.startswith(str(tmp_path))
    assert absolute.src == str(tmp_path / "x")


def test_persist_all_writes_everything(tmp_path: Path) -> None:
    (tmp_path / "components" / "a").mkdir(parents=True)
    changes = _planned()
    changes.add_base_path(tmp_path)

    summary = changes.persist_all()

    link = tmp_path / "node_modules" / "@bit" / "s.a"
    assert link.is_symlink()
    assert link.resolve() == (tmp_path / "components" / "a").resolve()
    generated = tmp_path / "node_modules" / "@bit" / "s.b" / "bar" / "foo.js"
    assert generated.read_text(encoding="utf-8") == "module.exports = require('../../../../bar/foo');"
    descriptor = tmp_path / "node_modules" / "@bit" / "s.b" / "package.json"
    assert json.loads(descriptor.read_text(encoding="utf-8")) == {"name": "@bit/s.b"}
    assert descriptor.read_text(encoding="utf-8").endswith("}\n")
    assert (summary.symlinks, summary.files, summary.descriptors, summary.skipped) == (1, 1, 1, 0)


def test_persist_all_is_idempotent(tmp_path: Path) -> None:
    """Applying the same plan twice leaves the same filesystem state."""
    (tmp_path / "components" / "a").mkdir(parents=True)
    changes = _planned()
    changes.add_base_path(tmp_path)

    changes.persist_all()
    changes.persist_all()

    link = tmp_path / "node_modules" / "@bit" / "s.a"
    assert link.is_symlink()
    assert os.readlink(link) == os.path.join(str(tmp_path), "components/a")


def test_symlink_replaces_existing_destination(tmp_path: Path) -> None:
    (tmp_path / "target").mkdir()
    occupied_dir = tmp_path / "out" / "dir"
    occupied_dir.mkdir(parents=True)
    (occupied_dir / "stale.txt").write_text("x", encoding="utf-8")
    occupied_file = tmp_path / "out" / "file"
    occupied_file.write_text("x", encoding="utf-8")

    SymlinkEdge(src=str(tmp_path / "target"), dest=str(occupied_dir)).write()
    SymlinkEdge(src=str(tmp_path / "target"), dest=str(occupied_file)).write()

    assert occupied_dir.is_symlink()
    assert occupied_file.is_symlink()
    assert (tmp_path / "target").is_dir()


def test_generated_file_without_override_keeps_existing(tmp_path: Path) -> None:
    target = tmp_path / "index.js"
    target.write_text("original", encoding="utf-8")
    changes = ChangeSet()
    changes.add_file(
        GeneratedFileEdge(path=str(target), content="new", src_path="x.js", override=False)
    )

    summary = changes.persist_all()

    assert target.read_text(encoding="utf-8") == "original"
    assert summary.skipped == 1
    assert summary.files == 0


def test_merge_preserves_order() -> None:
    first = ChangeSet()
    first.add_symlink(SymlinkEdge(src="a", dest="x/a"))
    second = ChangeSet()
    second.add_many_symlinks([SymlinkEdge(src="b", dest="x/b"), SymlinkEdge(src="c", dest="x/c")])

    first.merge(second)

    assert [s.src for s in first.symlinks] == ["a", "b", "c"]
    assert not first.is_empty()
    assert ChangeSet().is_empty()
