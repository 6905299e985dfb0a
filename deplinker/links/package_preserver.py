"""Third-party package mirroring for relocated dist output.

When a component's dists are written outside its directory, code in the
dist directory can no longer see the packages installed under the
component's root. Each installed package is symlinked into the dist
directory's package directory one by one.
"""

from __future__ import annotations

import logging
import posixpath
from typing import List, Optional, Set

from deplinker.errors import MissingWorkspaceContextError
from deplinker.links.changeset import SymlinkEdge
from deplinker.model.component import Component
from deplinker.workspace.context import WorkspaceContext

logger = logging.getLogger("deplinker.links.package_preserver")


class PackagePreserver:
    """Mirrors a component's installed packages into its dist directory."""

    def __init__(self, context: Optional[WorkspaceContext]) -> None:
        if context is None:
            raise MissingWorkspaceContextError(
                "package mirroring expects a workspace context"
            )
        self.context = context

    def _list_packages(self, packages_dir: str) -> List[str]:
        directory = self.context.get_path() / packages_dir
        if not directory.is_dir():
            return []
        return sorted(
            entry.name for entry in directory.iterdir() if not entry.name.startswith(".")
        )

    def _dirs_to_filter(self, component: Component) -> Set[str]:
        # with dependencies saved as components the binding-prefix directory
        # holds managed links, not packages
        dirs: Set[str] = set()
        if component.dependencies_saved_as_components:
            dirs.add(self.context.binding_prefix.split("/")[0])
        # custom-resolved import sources of runtime dependencies are linked
        # by the repair pass
        for import_source in component.get_custom_resolved_data(include_dev=False):
            dirs.add(import_source.split("/")[0])
        return dirs

    def get_symlink_packages(
        self, from_dir: str, to_dir: str, component: Component
    ) -> List[SymlinkEdge]:
        """Return one unattributed symlink per package to mirror.

        Args:
            from_dir: Workspace-relative component source directory.
            to_dir: Workspace-relative dist directory.
            component: Owner of both directories.
        """
        packages_dir = self.context.packages_dir
        from_packages = posixpath.join(from_dir, packages_dir)
        to_packages = posixpath.join(to_dir, packages_dir)
        logger.debug(
            "symlinkPackages for dists outside the component directory from %s to %s",
            from_packages,
            to_packages,
        )
        dirs_to_filter = self._dirs_to_filter(component)
        dirs = [d for d in self._list_packages(from_packages) if d not in dirs_to_filter]
        return [
            SymlinkEdge(
                src=posixpath.join(from_packages, d),
                dest=posixpath.join(to_packages, d),
            )
            for d in dirs
        ]


__all__ = ["PackagePreserver"]
