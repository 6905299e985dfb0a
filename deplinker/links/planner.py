"""Link planner: binds components into the package-resolution directory.

The planner runs in two phases. Planning fans out one task per component
on a thread pool; each task returns its own ChangeSet, and the ChangeSets
are merged in input order after every task has finished. Applying the
merged ChangeSet is the only step that writes to disk, and it only starts
when planning succeeded for every component.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterable, List, Optional

from deplinker.errors import (
    MissingPolicyError,
    MissingWorkspaceContextError,
    UnrecognizedOriginError,
)
from deplinker.links.changeset import ChangeSet
from deplinker.links.reporter import LinkReport, build_link_report
from deplinker.links.strategies import (
    PlanningState,
    plan_authored,
    plan_imported,
    plan_nested,
)
from deplinker.model.component import Component
from deplinker.model.component_map import ComponentMap, Origin
from deplinker.model.ids import ComponentId
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.planner")

DEFAULT_MAX_WORKERS = 8


def get_unique_components(components: Iterable[Component]) -> List[Component]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: Dict[ComponentId, Component] = {}
    for component in components:
        seen.setdefault(component.id, component)
    return list(seen.values())


class LinkPlanner:
    """Links components to the package directory so absolute requires work.

    For example `require('@bit/remote-scope.bar.foo')` instead of a relative
    path into the component's directory.
    """

    def __init__(
        self,
        components: Iterable[Component],
        context: Optional[WorkspaceContext] = None,
        component_map: Optional[ComponentMap] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """Initialize the planner.

        Args:
            components: Components to link; duplicates are dropped.
            context: Workspace context. None when linking in an isolated
                environment that only has a component map.
            component_map: Component lookup. Defaults to the context's.
            max_workers: Planning threads. Defaults to the configured value.

        Raises:
            MissingWorkspaceContextError: If neither a context nor a
                component map is given.
        """
        self.components = get_unique_components(components)
        self.context = context
        if component_map is None:
            if context is None:
                raise MissingWorkspaceContextError(
                    "LinkPlanner expects a workspace context or a component map"
                )
            component_map = context.component_map
        self.component_map = component_map
        if max_workers is None:
            max_workers = context.config.max_workers if context else DEFAULT_MAX_WORKERS
        self.max_workers = max_workers
        self.changes = ChangeSet()

    def link(self) -> LinkReport:
        """Plan, apply and report.

        The report is taken from the planned, workspace-relative paths; it is
        returned only once every mutation has been written.
        """
        changes = self.get_links()
        report = self.get_links_results()
        if self.context is not None:
            changes.add_base_path(self.context.get_path())
        changes.persist_all()
        return report

    def get_links(self) -> ChangeSet:
        """Plan every component and return the merged ChangeSet."""
        self.changes = ChangeSet()
        self._populate_should_dependencies_saved_as_components_data()
        if not self.components:
            return self.changes

        state = PlanningState.create(self.component_map, self.context)
        workers = max(1, min(self.max_workers, len(self.components)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="deplinker-plan") as executor:
            futures: List[Future] = [
                executor.submit(self._plan_component, component, state)
                for component in self.components
            ]
            _, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()

        # first failure in input order wins; nothing is merged on failure
        for future in futures:
            if not future.cancelled() and future.exception() is not None:
                raise future.exception()
        for future in futures:
            self.changes.merge(future.result())
        return self.changes

    def get_links_results(self) -> LinkReport:
        return build_link_report(self.changes, self.components)

    def _plan_component(self, component: Component, state: PlanningState) -> ChangeSet:
        logger.debug("linking component to node_modules: %s", component.id)
        component_map = self.component_map.get_component(component.id)
        component.component_map = component_map
        origin = component_map.get_origin()
        if origin is Origin.IMPORTED:
            return plan_imported(component, state)
        elif origin is Origin.NESTED:
            return plan_nested(component, state)
        elif origin is Origin.AUTHORED:
            return plan_authored(component, state)
        raise UnrecognizedOriginError(component.id, component_map.origin)

    def _populate_should_dependencies_saved_as_components_data(self) -> None:
        """Fetch the save-dependencies-as-components policy in one batched query.

        Without a workspace context the components keep their current value.
        """
        if not self.components:
            return
        if self.context is None:
            logger.debug("No workspace context; keeping dependencies_saved_as_components as is")
            return

        answers = self.context.should_dependencies_saved_as_components(
            [c.id for c in self.components]
        )
        by_id = {answer.id: answer.save_dependencies_as_components for answer in answers}
        for component in self.components:
            if component.id not in by_id:
                raise MissingPolicyError(component.id)
            component.dependencies_saved_as_components = by_id[component.id]


def link_components(
    components: Iterable[Component],
    context: Optional[WorkspaceContext] = None,
    component_map: Optional[ComponentMap] = None,
) -> LinkReport:
    """Link `components` and return the report. Convenience over LinkPlanner."""
    return LinkPlanner(components, context=context, component_map=component_map).link()


__all__ = ["LinkPlanner", "get_unique_components", "link_components"]
