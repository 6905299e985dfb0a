"""Dependency edge linking.

Exposes each dependency of a component inside the component's own
package-resolution directory, so `require('<prefix>/<dep>')` from the
component's files resolves to the dependency's root directory.
"""

from __future__ import annotations

import logging
import posixpath
from typing import List, Optional

from deplinker.links.changeset import SymlinkEdge
from deplinker.model.component import Component, Dependency, Dists
from deplinker.model.component_map import ComponentMap
from deplinker.model.ids import ComponentId
from deplinker.utils.path_utils import get_packages_path_of_component
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.dependency_linker")


class DependencyEdgeLinker:
    """Computes the symlinks exposing dependencies under their dependents."""

    def __init__(
        self,
        component_map: ComponentMap,
        context: Optional[WorkspaceContext] = None,
    ) -> None:
        self.component_map = component_map
        self.context = context

    @property
    def packages_dir(self) -> str:
        return self.context.packages_dir if self.context else "node_modules"

    def get_dependency_link(
        self,
        parent_root_dir: str,
        dependency_id: ComponentId,
        root_dir: str,
        binding_prefix: str,
        owner_id: ComponentId,
    ) -> SymlinkEdge:
        """Link `root_dir` into the package slot of `dependency_id` inside `parent_root_dir`."""
        relative_dest_path = get_packages_path_of_component(
            binding_prefix, dependency_id, self.packages_dir
        )
        dest_path_inside_parent = posixpath.join(parent_root_dir, relative_dest_path)
        return SymlinkEdge(src=root_dir, dest=dest_path_inside_parent, component_id=owner_id)

    def get_links_for_dependency(
        self, component: Component, dependency: Dependency
    ) -> List[SymlinkEdge]:
        """Return the one or two symlinks for one dependency of `component`.

        Dependencies missing from the component map are plain packages
        rather than linked components, so they produce nothing.
        """
        dependency_entry = self.component_map.get_component_if_exist(dependency.id)
        if dependency_entry is None:
            return []

        parent_root_dir = None
        if component.component_map is not None:
            parent_root_dir = component.component_map.get_root_dir()
        dependency_root_dir = dependency_entry.get_root_dir()
        if parent_root_dir is None or dependency_root_dir is None:
            logger.debug(
                "Skipping dependency link %s -> %s: no root directory",
                component.id,
                dependency.id,
            )
            return []

        links = [
            self.get_dependency_link(
                parent_root_dir,
                dependency.id,
                dependency_root_dir,
                component.binding_prefix,
                component.id,
            )
        ]
        if self.context is not None and not self.context.should_dists_be_inside_components():
            # with dists outside the components, a dist dir always exists:
            # components without compiled output get their files copied there
            from_dist = Dists.get_dist_dir(self.context, parent_root_dir)
            to_dist = Dists.get_dist_dir(self.context, dependency_root_dir)
            dist_link = self.get_dependency_link(
                from_dist,
                dependency.id,
                to_dist,
                component.binding_prefix,
                component.id,
            )
            dist_link.for_dist_outside_components_dir = True
            links.append(dist_link)
        return links

    def get_dependencies_links(self, component: Component) -> List[SymlinkEdge]:
        links: List[SymlinkEdge] = []
        for dependency in component.get_all_dependencies():
            links.extend(self.get_links_for_dependency(component, dependency))
        return links


__all__ = ["DependencyEdgeLinker"]
