"""Workspace context: the ambient state link planning reads.

A WorkspaceContext is optional for the planner. Without one (e.g. when
linking inside an isolated environment that only carries a component map)
dists stay inside components and no repair passes run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from deplinker.config import LinkerConfig
from deplinker.model.component_map import ComponentMap
from deplinker.model.ids import ComponentId
from deplinker.workspace.snapshots import SnapshotStore

logger = logging.getLogger("deplinker.workspace.context")


@dataclass(frozen=True)
class SaveDependenciesAnswer:
    """Answer of the batched policy query for one component."""

    id: ComponentId
    save_dependencies_as_components: bool


PolicyQuery = Callable[[Sequence[ComponentId]], List[SaveDependenciesAnswer]]


class WorkspaceContext:
    """Read-only view of a workspace for the link engine.

    Attributes:
        path: Absolute workspace root.
        config: Workspace link configuration.
        component_map: Tracked components.
        snapshots: Store of previously persisted component snapshots.
    """

    def __init__(
        self,
        path: Path,
        component_map: ComponentMap,
        config: Optional[LinkerConfig] = None,
        snapshots: Optional[SnapshotStore] = None,
        policy_query: Optional[PolicyQuery] = None,
    ) -> None:
        self.path = Path(path).resolve()
        self.config = config or LinkerConfig.default()
        self.component_map = component_map
        self.snapshots = snapshots or SnapshotStore(self.path / self.config.snapshots_dir)
        self._policy_query = policy_query

    def get_path(self) -> Path:
        return self.path

    @property
    def binding_prefix(self) -> str:
        return self.config.binding_prefix

    @property
    def packages_dir(self) -> str:
        return self.config.packages_dir

    def should_dists_be_inside_components(self) -> bool:
        return self.config.dists_inside_components

    def should_dependencies_saved_as_components(
        self, component_ids: Sequence[ComponentId]
    ) -> List[SaveDependenciesAnswer]:
        """Batched policy query: link dependencies as components or as packages?

        Delegates to the injected query when one was given; otherwise answers
        from configuration.
        """
        if self._policy_query is not None:
            return list(self._policy_query(component_ids))

        as_packages: Dict[str, bool] = {
            raw: True for raw in self.config.components_saved_as_packages
        }
        answers = []
        for component_id in component_ids:
            saved = self.config.save_dependencies_as_components
            if as_packages.get(component_id.to_string_without_version()):
                saved = False
            answers.append(SaveDependenciesAnswer(component_id, saved))
        logger.debug("Answered save-dependencies policy for %d components", len(answers))
        return answers


__all__ = ["PolicyQuery", "SaveDependenciesAnswer", "WorkspaceContext"]
