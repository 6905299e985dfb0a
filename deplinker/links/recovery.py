"""Repair passes for links a previous analysis found missing.

Two kinds of issues are repaired:

- missing dependency links: a referenced dependency has no link under the
  component's package directory;
- missing custom module-resolution links: an import written through a path
  alias has no redirect file.

Unlike ordinary dependency linking, which skips untracked dependencies, a
repair target that cannot be resolved is fatal: the issue was detected
against tracked components, so failing to find one means the workspace
state is corrupt.
"""

from __future__ import annotations

import logging
from typing import List

from deplinker.errors import MissingComponentError, MissingWorkspaceContextError
from deplinker.links.changeset import ChangeSet, SymlinkEdge
from deplinker.links.dependency_linker import DependencyEdgeLinker
from deplinker.links.link_generator import DependencyClosureLinker
from deplinker.model.component import Component
from deplinker.model.component_map import ComponentMap
from deplinker.model.ids import ComponentId
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.recovery")


class RecoveryLinker:
    """Re-derives links flagged as missing on a component."""

    def __init__(
        self,
        context: WorkspaceContext,
        component_map: ComponentMap,
        dependency_linker: DependencyEdgeLinker,
    ) -> None:
        if context is None:
            raise MissingWorkspaceContextError("link repair expects a workspace context")
        self.context = context
        self.component_map = component_map
        self.dependency_linker = dependency_linker
        self.closure_linker = DependencyClosureLinker(context, component_map, dependency_linker)

    def get_missing_links(self, component: Component) -> List[SymlinkEdge]:
        """Return a dependency link for every recorded missing link.

        Raises:
            MissingComponentError: If a recorded dependency is not tracked.
        """
        parent_root_dir = None
        if component.component_map is not None:
            parent_root_dir = component.component_map.get_root_dir()
        if parent_root_dir is None:
            raise MissingComponentError(component.id, "has no root directory to repair links in")

        links: List[SymlinkEdge] = []
        for file_name, dependency_ids in component.issues.missing_links.items():
            for raw_id in dependency_ids:
                dependency_id = self.component_map.get_id(raw_id, ignore_version=True)
                dependency_entry = self.component_map.get_component(dependency_id)
                root_dir = dependency_entry.get_root_dir()
                if root_dir is None:
                    raise MissingComponentError(dependency_id, "has no root directory")
                logger.debug(
                    "Repairing missing link %s -> %s (referenced by %s)",
                    component.id,
                    dependency_id,
                    file_name,
                )
                links.append(
                    self.dependency_linker.get_dependency_link(
                        parent_root_dir,
                        dependency_id,
                        root_dir,
                        component.binding_prefix,
                        component.id,
                    )
                )
        return links

    def get_missing_custom_resolved_links(self, component: Component) -> ChangeSet:
        """Rebuild custom-resolved links from the component's stored snapshot.

        Returns an empty ChangeSet when the component was never snapshotted.
        """
        snapshot = self.context.snapshots.load(component.id)
        if snapshot is None:
            return ChangeSet()

        flagged: List[ComponentId] = [
            dependency_id
            for dependency_ids in component.issues.missing_custom_module_resolution_links.values()
            for dependency_id in dependency_ids
        ]
        dependencies = [
            dependency
            for dependency in snapshot.get_all_dependencies()
            if any(dependency.id.is_equal_without_version(f) for f in flagged)
        ]
        logger.debug(
            "Repairing %d custom-resolved dependencies of %s", len(dependencies), component.id
        )
        return self.closure_linker.get_components_dependencies_links(component, dependencies)


__all__ = ["RecoveryLinker"]
