"""Component data model consumed by the link engine.

Components are owned by the caller. The planner only writes
`dependencies_saved_as_components` and attaches the component-map entry
(`component_map`) while planning.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from deplinker.model.ids import ComponentId

if TYPE_CHECKING:  # pragma: no cover
    from deplinker.model.component_map import ComponentMapEntry
    from deplinker.workspace.context import WorkspaceContext

DEFAULT_BINDING_PREFIX = "@bit"
DEFAULT_DIST_DIRNAME = "dist"


def to_posix(path: str) -> str:
    """Normalize a relative path to forward slashes without a trailing slash."""
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return "" if normalized == "." else normalized


@dataclass
class RelativePath:
    """How one file of the owner reaches one file of a dependency.

    Attributes:
        source_relative_path: Path of the required file inside the dependency.
        destination_relative_path: Path of the requiring file inside the owner.
        is_custom_resolve_used: Whether the import went through a path alias.
        import_source: The alias as written in the import statement.
    """

    source_relative_path: str
    destination_relative_path: str
    is_custom_resolve_used: bool = False
    import_source: Optional[str] = None


@dataclass
class Dependency:
    """A dependency relation. It does not own the target component."""

    id: ComponentId
    relative_paths: List[RelativePath] = field(default_factory=list)


@dataclass
class ComponentIssues:
    """Link problems found by a previous analysis pass, keyed by the referencing file."""

    missing_links: Dict[str, List[ComponentId]] = field(default_factory=dict)
    missing_custom_module_resolution_links: Dict[str, List[ComponentId]] = field(
        default_factory=dict
    )


@dataclass
class Dists:
    """Build output of a component.

    Attributes:
        entries: Dist files, relative to the dist root.
        write_dists_files: Whether dist files are written to the filesystem.
    """

    entries: List[str] = field(default_factory=list)
    write_dists_files: bool = True
    _dist_entry_to_strip: Optional[str] = field(default=None, init=False, repr=False)

    def is_empty(self) -> bool:
        return not self.entries

    @staticmethod
    def get_dist_dir(
        context: Optional["WorkspaceContext"], component_root_dir: str
    ) -> str:
        """Return the dist directory of a component, relative to the workspace.

        Inside-component dists live in `<root>/dist`. Otherwise the root
        directory is re-rooted under the configured dist target, with the
        dist entry prefix removed when the root starts with it.
        """
        root_dir = to_posix(component_root_dir)
        if context is None or context.should_dists_be_inside_components():
            return posixpath.join(root_dir, DEFAULT_DIST_DIRNAME)

        config = context.config
        entry = to_posix(config.dist_entry) if config.dist_entry else ""
        if entry and (root_dir == entry or root_dir.startswith(entry + "/")):
            root_dir = root_dir[len(entry) :].lstrip("/")
        return to_posix(posixpath.join(config.dist_target, root_dir))

    def update_per_workspace_config(
        self, context: Optional["WorkspaceContext"]
    ) -> None:
        """Adopt the workspace dist-entry remapping for per-file lookups."""
        if context is None or not context.config.dist_entry:
            self._dist_entry_to_strip = None
            return
        self._dist_entry_to_strip = to_posix(context.config.dist_entry)

    def calculate_dist_file_for_authored(
        self, component_file: str, context: Optional["WorkspaceContext"]
    ) -> str:
        """Map a workspace-relative source file to its dist file, if any.

        Falls back to the source file when there are no written dists or no
        dist file shares the source file's path (ignoring extension).
        """
        source = to_posix(component_file)
        if context is None or self.is_empty() or not self.write_dists_files:
            return source

        lookup = source
        strip = self._dist_entry_to_strip
        if strip and lookup.startswith(strip + "/"):
            lookup = lookup[len(strip) + 1 :]
        stem = posixpath.splitext(lookup)[0]

        for entry in self.entries:
            entry_posix = to_posix(entry)
            if posixpath.splitext(entry_posix)[0] == stem:
                return posixpath.join(to_posix(context.config.dist_target), entry_posix)
        return source


@dataclass
class Component:
    """A versioned, independently tracked unit of source code."""

    id: ComponentId
    dependencies: List[Dependency] = field(default_factory=list)
    dev_dependencies: List[Dependency] = field(default_factory=list)
    dists: Dists = field(default_factory=Dists)
    binding_prefix: str = DEFAULT_BINDING_PREFIX
    written_path: Optional[str] = None
    package_dependencies: Dict[str, str] = field(default_factory=dict)
    issues: ComponentIssues = field(default_factory=ComponentIssues)
    dependencies_saved_as_components: bool = True
    # attached by the planner
    component_map: Optional["ComponentMapEntry"] = field(default=None, repr=False)

    def get_all_dependencies(self) -> List[Dependency]:
        return [*self.dependencies, *self.dev_dependencies]

    def has_dependencies(self) -> bool:
        return bool(self.dependencies or self.dev_dependencies)

    def get_custom_resolved_data(self, include_dev: bool = True) -> Dict[str, ComponentId]:
        """Map every custom-resolved import source to the dependency it names.

        Args:
            include_dev: Whether dev-dependencies are scanned too.
        """
        dependencies = self.get_all_dependencies() if include_dev else self.dependencies
        data: Dict[str, ComponentId] = {}
        for dependency in dependencies:
            for relative_path in dependency.relative_paths:
                if relative_path.is_custom_resolve_used and relative_path.import_source:
                    data[relative_path.import_source] = dependency.id
        return data


__all__ = [
    "Component",
    "ComponentIssues",
    "DEFAULT_BINDING_PREFIX",
    "DEFAULT_DIST_DIRNAME",
    "Dependency",
    "Dists",
    "RelativePath",
    "to_posix",
]
