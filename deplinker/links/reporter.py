"""Per-component report of what a link run bound."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from deplinker.links.changeset import ChangeSet
from deplinker.model.component import Component
from deplinker.model.ids import ComponentId


@dataclass(frozen=True)
class LinkBinding:
    """One applied edge, as reported: `from_path` is now reachable at `to`."""

    from_path: str
    to: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_path, "to": self.to}


LinkReport = Dict[ComponentId, List[LinkBinding]]


def build_link_report(changes: ChangeSet, components: Sequence[Component]) -> LinkReport:
    """Group the attributed edges of `changes` by owning component.

    Bindings keep emission order; components appear in first-edge order,
    followed by the planned components that produced no edge.
    """
    report: LinkReport = {}

    def add_binding(component_id: Optional[ComponentId], from_path: str, to: str) -> None:
        if component_id is None:
            return
        report.setdefault(component_id, []).append(LinkBinding(from_path, to))

    for symlink in changes.symlinks:
        add_binding(symlink.component_id, symlink.src, symlink.dest)
    for file in changes.files:
        add_binding(file.component_id, file.src_path, file.path)
    for component in components:
        report.setdefault(component.id, [])
    return report


def report_to_dict(report: LinkReport) -> List[Dict[str, Any]]:
    """Serialize a report to JSON-friendly data."""
    return [
        {"id": component_id.to_string(), "bound": [b.to_dict() for b in bindings]}
        for component_id, bindings in report.items()
    ]


__all__ = ["LinkBinding", "LinkReport", "build_link_report", "report_to_dict"]
