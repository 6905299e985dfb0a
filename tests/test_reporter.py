"""Tests for the link report."""

from deplinker.links.changeset import (
    ChangeSet,
    GeneratedFileEdge,
    PackageDescriptorEdge,
    SymlinkEdge,
)
from deplinker.links.reporter import LinkBinding, build_link_report, report_to_dict
from deplinker.model.component import Component
from deplinker.model.ids import ComponentId

A = ComponentId.parse("s/a@1.0.0")
B = ComponentId.parse("s/b@1.0.0")
C = ComponentId.parse("s/c@1.0.0")


def test_report_groups_attributed_edges_per_component() -> None:
    """Symlinks come before files; unattributed edges are left out."""
    changes = ChangeSet()
    changes.add_file(GeneratedFileEdge(path="nm/a/x.js", content="", src_path="x.js", component_id=A))
    changes.add_symlink(SymlinkEdge(src="components/b", dest="nm/s.b", component_id=B))
    changes.add_symlink(SymlinkEdge(src="components/a", dest="nm/s.a", component_id=A))
    changes.add_symlink(SymlinkEdge(src="components/a/node_modules/react", dest="dist/a/node_modules/react"))
    changes.add_descriptor(PackageDescriptorEdge(path="nm/a/package.json", data={}))

    report = build_link_report(changes, [Component(id=A), Component(id=B), Component(id=C)])

    assert list(report) == [B, A, C]
    assert report[A] == [LinkBinding("components/a", "nm/s.a"), LinkBinding("x.js", "nm/a/x.js")]
    assert report[B] == [LinkBinding("components/b", "nm/s.b")]
    assert report[C] == []


def test_report_to_dict() -> None:
    report = {A: [LinkBinding("components/a", "nm/s.a")], B: []}

    assert report_to_dict(report) == [
        {"id": "s/a@1.0.0", "bound": [{"from": "components/a", "to": "nm/s.a"}]},
        {"id": "s/b@1.0.0", "bound": []},
    ]
