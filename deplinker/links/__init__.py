"""Link generation: plan filesystem links for components and apply them."""

from deplinker.links.changeset import (
    ChangeSet,
    GeneratedFileEdge,
    PackageDescriptorEdge,
    PersistSummary,
    SymlinkEdge,
)
from deplinker.links.planner import LinkPlanner, get_unique_components, link_components
from deplinker.links.reporter import (
    LinkBinding,
    LinkReport,
    build_link_report,
    report_to_dict,
)

__all__ = [
    "ChangeSet",
    "GeneratedFileEdge",
    "LinkBinding",
    "LinkPlanner",
    "LinkReport",
    "PackageDescriptorEdge",
    "PersistSummary",
    "SymlinkEdge",
    "build_link_report",
    "get_unique_components",
    "link_components",
    "report_to_dict",
]
