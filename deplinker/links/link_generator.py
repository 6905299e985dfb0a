"""Link generation over a component's dependency closure.

Used when links must be rebuilt from a stored snapshot rather than from
the in-memory component: the snapshot's dependency relations (and those of
the dependencies' own snapshots) are assembled into a directed graph, and
links are produced for the whole closure.
"""

from __future__ import annotations

import logging
import posixpath
from collections import deque
from typing import Dict, List, Optional

import networkx as nx

from deplinker.links.changeset import ChangeSet, GeneratedFileEdge
from deplinker.links.dependency_linker import DependencyEdgeLinker
from deplinker.links.link_content import get_link_to_package_content
from deplinker.model.component import Component, Dependency, RelativePath
from deplinker.model.component_map import ComponentMap, ComponentMapEntry
from deplinker.model.ids import ComponentId
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.link_generator")


class DependencyClosureLinker:
    """Generates dependency links for a component and its snapshot closure."""

    def __init__(
        self,
        context: WorkspaceContext,
        component_map: ComponentMap,
        dependency_linker: DependencyEdgeLinker,
    ) -> None:
        self.context = context
        self.component_map = component_map
        self.dependency_linker = dependency_linker

    def build_closure_graph(
        self, owner_id: ComponentId, dependencies: List[Dependency]
    ) -> nx.DiGraph:
        """Return owner -> dependency edges, expanded through stored snapshots.

        Each node carries `order`, its breadth-first discovery index, so
        callers can walk the closure deterministically.
        """
        graph = nx.DiGraph()
        graph.add_node(owner_id, order=0)
        queue: deque = deque()
        for dependency in dependencies:
            if dependency.id not in graph:
                graph.add_node(dependency.id, order=graph.number_of_nodes())
                queue.append(dependency.id)
            graph.add_edge(owner_id, dependency.id)

        while queue:
            node = queue.popleft()
            snapshot = self.context.snapshots.load(node)
            if snapshot is None:
                continue
            for dependency in snapshot.get_all_dependencies():
                if dependency.id not in graph:
                    graph.add_node(dependency.id, order=graph.number_of_nodes())
                    queue.append(dependency.id)
                graph.add_edge(node, dependency.id)
        return graph

    def _custom_resolve_file(
        self,
        owner_root_dir: str,
        relative_path: RelativePath,
        dependency_entry: ComponentMapEntry,
        binding_prefix: str,
        owner_id: ComponentId,
    ) -> Optional[GeneratedFileEdge]:
        import_source = relative_path.import_source or ""
        file_path = posixpath.join(owner_root_dir, self.context.packages_dir, import_source)
        if not posixpath.splitext(import_source)[1]:
            file_path += posixpath.splitext(relative_path.source_relative_path)[1]

        package_name = f"{binding_prefix}/{dependency_entry.id.to_slot_name()}"
        source = relative_path.source_relative_path
        if dependency_entry.main_file is None or source != dependency_entry.main_file:
            package_name = f"{package_name}/{posixpath.splitext(source)[0]}"

        content = get_link_to_package_content(file_path, package_name)
        if content is None:
            logger.debug("No package redirect template for %s", file_path)
            return None
        return GeneratedFileEdge(
            path=file_path,
            content=content,
            src_path=package_name,
            component_id=owner_id,
            override=True,
        )

    def get_components_dependencies_links(
        self, component: Component, dependencies: List[Dependency]
    ) -> ChangeSet:
        """Return files and symlinks linking `dependencies` and their closure.

        Every edge is attributed to `component`.
        """
        changes = ChangeSet()
        owner_root_dir = None
        if component.component_map is not None:
            owner_root_dir = component.component_map.get_root_dir()
        if owner_root_dir is None:
            return changes

        prefix = component.binding_prefix
        files: Dict[str, GeneratedFileEdge] = {}
        for dependency in dependencies:
            entry = self.component_map.get_component_if_exist(dependency.id, ignore_version=True)
            root_dir = entry.get_root_dir() if entry else None
            if entry is None or root_dir is None:
                logger.warning(
                    "Cannot link %s into %s: not tracked with a root directory",
                    dependency.id,
                    component.id,
                )
                continue
            changes.add_symlink(
                self.dependency_linker.get_dependency_link(
                    owner_root_dir, entry.id, root_dir, prefix, component.id
                )
            )
            for relative_path in dependency.relative_paths:
                if not (relative_path.is_custom_resolve_used and relative_path.import_source):
                    continue
                link_file = self._custom_resolve_file(
                    owner_root_dir, relative_path, entry, prefix, component.id
                )
                if link_file is not None:
                    files.setdefault(link_file.path, link_file)
        changes.add_many_files(files.values())

        graph = self.build_closure_graph(component.id, dependencies)
        closure = sorted(
            nx.descendants(graph, component.id),
            key=lambda n: graph.nodes[n]["order"],
        )
        for node in closure:
            node_entry = self.component_map.get_component_if_exist(node, ignore_version=True)
            node_root_dir = node_entry.get_root_dir() if node_entry else None
            if node_root_dir is None:
                continue
            for dependency_id in graph.successors(node):
                dep_entry = self.component_map.get_component_if_exist(
                    dependency_id, ignore_version=True
                )
                dep_root_dir = dep_entry.get_root_dir() if dep_entry else None
                if dep_root_dir is None:
                    continue
                changes.add_symlink(
                    self.dependency_linker.get_dependency_link(
                        node_root_dir, dep_entry.id, dep_root_dir, prefix, component.id
                    )
                )
        logger.debug(
            "Closure links for %s: %d symlinks, %d files over %d components",
            component.id,
            len(changes.symlinks),
            len(changes.files),
            graph.number_of_nodes() - 1,
        )
        return changes


__all__ = ["DependencyClosureLinker"]
