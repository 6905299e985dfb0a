"""Per-origin link planning strategies.

Each strategy is a function from a component and the shared, read-only
planning state to a private ChangeSet. The planner merges the ChangeSets
once every strategy has returned.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Optional

from deplinker.errors import LinkError
from deplinker.links.changeset import ChangeSet, GeneratedFileEdge, SymlinkEdge
from deplinker.links.dependency_linker import DependencyEdgeLinker
from deplinker.links.link_content import get_link_to_file_content
from deplinker.links.package_descriptor import build_package_descriptor
from deplinker.links.package_preserver import PackagePreserver
from deplinker.links.recovery import RecoveryLinker
from deplinker.model.component import Component, Dists
from deplinker.model.component_map import ComponentMap
from deplinker.utils.path_utils import (
    get_packages_path_of_component,
    path_relative_regardless_cwd,
)
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.strategies")


@dataclass(frozen=True)
class PlanningState:
    """Read-only state shared by all planning tasks of one run.

    `package_preserver` and `recovery` exist only with a workspace context.
    """

    component_map: ComponentMap
    dependency_linker: DependencyEdgeLinker
    context: Optional[WorkspaceContext] = None
    package_preserver: Optional[PackagePreserver] = None
    recovery: Optional[RecoveryLinker] = None

    @classmethod
    def create(
        cls, component_map: ComponentMap, context: Optional[WorkspaceContext]
    ) -> "PlanningState":
        dependency_linker = DependencyEdgeLinker(component_map, context)
        if context is None:
            return cls(component_map=component_map, dependency_linker=dependency_linker)
        return cls(
            component_map=component_map,
            dependency_linker=dependency_linker,
            context=context,
            package_preserver=PackagePreserver(context),
            recovery=RecoveryLinker(context, component_map, dependency_linker),
        )

    @property
    def packages_dir(self) -> str:
        return self.dependency_linker.packages_dir


def plan_imported(component: Component, state: PlanningState) -> ChangeSet:
    """Link an imported component's directory (or its dist) into its package slot."""
    changes = ChangeSet()
    component_map = component.component_map
    context = state.context
    binding_prefix = context.binding_prefix if context else component.binding_prefix
    link_path = get_packages_path_of_component(binding_prefix, component.id, state.packages_dir)

    # a user may have moved the component directory
    src_target = component.written_path or component_map.get_root_dir()
    if not src_target:
        raise LinkError(f"imported component {component.id} has no root directory")

    dists = component.dists
    if (
        context is not None
        and not dists.is_empty()
        and dists.write_dists_files
        and not context.should_dists_be_inside_components()
    ):
        dist_target = Dists.get_dist_dir(context, component_map.get_root_dir() or src_target)
        changes.add_many_symlinks(
            state.package_preserver.get_symlink_packages(src_target, dist_target, component)
        )
        dist_symlink = SymlinkEdge(src=dist_target, dest=link_path, component_id=component.id)
        dist_symlink.for_dist_outside_components_dir = True
        changes.add_symlink(dist_symlink)
    else:
        changes.add_symlink(SymlinkEdge(src=src_target, dest=link_path, component_id=component.id))

    if component.has_dependencies():
        changes.add_many_symlinks(state.dependency_linker.get_dependencies_links(component))

    if state.recovery is not None and component.issues.missing_links:
        changes.add_many_symlinks(state.recovery.get_missing_links(component))

    if state.recovery is not None and component.issues.missing_custom_module_resolution_links:
        changes.merge(state.recovery.get_missing_custom_resolved_links(component))
    return changes


def plan_nested(component: Component, state: PlanningState) -> ChangeSet:
    """Link only the dependencies of a nested component.

    Nested components are linked at the top level during import only; a
    link-only run does not load them, so they are never re-linked here.
    """
    changes = ChangeSet()
    if component.has_dependencies():
        changes.add_many_symlinks(state.dependency_linker.get_dependencies_links(component))
    return changes


def plan_authored(component: Component, state: PlanningState) -> ChangeSet:
    """Populate an exported authored component's package slot file by file."""
    changes = ChangeSet()
    component_id = component.id
    if not component_id.has_scope():
        # unexported components have no absolute package name
        return changes

    component_map = component.component_map
    slot_dir = get_packages_path_of_component(
        component.binding_prefix, component_id, state.packages_dir
    )
    component.dists.update_per_workspace_config(state.context)

    for file in component_map.files_relative_to_workspace():
        possibly_dist = component.dists.calculate_dist_file_for_authored(file, state.context)
        dest = posixpath.join(slot_dir, file)
        dest_relative = path_relative_regardless_cwd(posixpath.dirname(dest), possibly_dist)
        file_content = get_link_to_file_content(dest_relative)
        if file_content:
            changes.add_file(
                GeneratedFileEdge(
                    path=dest,
                    content=file_content,
                    src_path=file,
                    component_id=component_id,
                    override=True,
                )
            )
        else:
            # unsupported file type
            changes.add_symlink(SymlinkEdge(src=file, dest=dest, component_id=component_id))

    changes.add_descriptor(
        build_package_descriptor(
            component, slot_dir, component_map.main_file_relative_to_workspace()
        )
    )
    return changes


__all__ = ["PlanningState", "plan_authored", "plan_imported", "plan_nested"]
