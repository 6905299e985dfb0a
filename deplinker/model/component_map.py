"""Component map: where each tracked component lives and how it got there."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from deplinker.errors import MissingComponentError, UnrecognizedOriginError
from deplinker.model.component import to_posix
from deplinker.model.ids import ComponentId

logger = logging.getLogger("deplinker.model.component_map")


class Origin(Enum):
    """How a component entered the workspace."""

    IMPORTED = "imported"
    NESTED = "nested"
    AUTHORED = "authored"


@dataclass
class ComponentMapEntry:
    """Component-map record of one tracked component.

    Attributes:
        id: Tracked component id.
        origin: Origin as recorded on disk. Kept raw so an unknown value is
            reported by the planner rather than rejected at load time.
        root_dir: Workspace-relative root directory (absent for authored
            components).
        track_dir: Directory an authored component is tracked from, if any.
        files: Component files, relative to root_dir/track_dir.
        main_file: Main file, relative to root_dir/track_dir.
    """

    id: ComponentId
    origin: str
    root_dir: Optional[str] = None
    track_dir: Optional[str] = None
    files: List[str] = field(default_factory=list)
    main_file: Optional[str] = None

    def get_origin(self) -> Origin:
        try:
            return Origin(self.origin)
        except ValueError:
            raise UnrecognizedOriginError(self.id, self.origin) from None

    def get_root_dir(self) -> Optional[str]:
        return to_posix(self.root_dir) if self.root_dir else None

    def _base_dir(self) -> str:
        return to_posix(self.root_dir or self.track_dir or "")

    def files_relative_to_workspace(self) -> List[str]:
        base = self._base_dir()
        return [to_posix(posixpath.join(base, f)) for f in self.files]

    def main_file_relative_to_workspace(self) -> Optional[str]:
        if not self.main_file:
            return None
        return to_posix(posixpath.join(self._base_dir(), self.main_file))


class ComponentMap:
    """Lookup of tracked components keyed by id."""

    def __init__(self, entries: Optional[Iterable[ComponentMapEntry]] = None) -> None:
        self._entries: Dict[ComponentId, ComponentMapEntry] = {}
        for entry in entries or []:
            self.add(entry)

    def add(self, entry: ComponentMapEntry) -> None:
        if entry.id in self._entries:
            logger.debug("Replacing component-map entry for %s", entry.id)
        self._entries[entry.id] = entry

    def __iter__(self) -> Iterator[ComponentMapEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._entries

    def get_component_if_exist(
        self, component_id: ComponentId, ignore_version: bool = False
    ) -> Optional[ComponentMapEntry]:
        """Return the entry for `component_id`, or None when it is not tracked."""
        entry = self._entries.get(component_id)
        if entry is not None or not ignore_version:
            return entry
        for candidate in self._entries.values():
            if candidate.id.is_equal_without_version(component_id):
                return candidate
        return None

    def get_component(
        self, component_id: ComponentId, ignore_version: bool = False
    ) -> ComponentMapEntry:
        """Return the entry for `component_id`.

        Raises:
            MissingComponentError: If the component is not tracked.
        """
        entry = self.get_component_if_exist(component_id, ignore_version=ignore_version)
        if entry is None:
            raise MissingComponentError(component_id)
        return entry

    def get_id(self, raw: ComponentId, ignore_version: bool = True) -> ComponentId:
        """Resolve a possibly unpinned or stale id to the tracked id.

        Raises:
            MissingComponentError: If no tracked component matches.
        """
        return self.get_component(raw, ignore_version=ignore_version).id


__all__ = ["ComponentMap", "ComponentMapEntry", "Origin"]
