"""Planned filesystem mutations.

A ChangeSet collects symlinks, generated redirect files and package
descriptors while planning, and writes them in one `persist_all` call.
Planning never touches the filesystem for writing; applying is the only
phase that does.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from deplinker.model.ids import ComponentId
from deplinker.utils.path_utils import join_base_path

logger = logging.getLogger("deplinker.links.changeset")


@dataclass
class SymlinkEdge:
    """A symlink at `dest` pointing to `src`.

    Attributes:
        src: Link target.
        dest: Link location.
        component_id: Owning component; None for package mirrors.
        for_dist_outside_components_dir: Whether the link serves dist output
            stored outside the component's source tree.
    """

    src: str
    dest: str
    component_id: Optional[ComponentId] = None
    for_dist_outside_components_dir: bool = False

    def add_base_path(self, base_path: Union[str, Path]) -> None:
        self.src = join_base_path(base_path, self.src)
        self.dest = join_base_path(base_path, self.dest)

    def write(self) -> None:
        """Create the symlink, replacing whatever occupies the destination."""
        dest = Path(self.dest)
        _remove_existing(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(self.src, dest, target_is_directory=Path(self.src).is_dir())


@dataclass
class GeneratedFileEdge:
    """A generated redirect file.

    Attributes:
        path: Destination of the generated file.
        content: File content.
        src_path: The file the redirect stands for, used for reporting.
        component_id: Owning component.
        override: Whether an existing file may be replaced.
    """

    path: str
    content: str
    src_path: str
    component_id: Optional[ComponentId] = None
    override: bool = True

    def add_base_path(self, base_path: Union[str, Path]) -> None:
        self.path = join_base_path(base_path, self.path)

    def write(self) -> bool:
        """Write the file. Returns False when an existing file was kept."""
        target = Path(self.path)
        if not self.override and (target.exists() or target.is_symlink()):
            logger.debug("Keeping existing file %s (override disabled)", target)
            return False
        if target.is_symlink() or target.is_dir():
            _remove_existing(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.content, encoding="utf-8")
        return True


@dataclass
class PackageDescriptorEdge:
    """A package descriptor (`package.json`) written into a package slot."""

    path: str
    data: Dict[str, Any]
    override: bool = True

    def add_base_path(self, base_path: Union[str, Path]) -> None:
        self.path = join_base_path(base_path, self.path)

    def to_content(self) -> str:
        return json.dumps(self.data, indent=2) + "\n"

    def write(self) -> bool:
        target = Path(self.path)
        if not self.override and target.exists():
            return False
        if target.is_symlink():
            target.unlink()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.to_content(), encoding="utf-8")
        return True


@dataclass
class PersistSummary:
    """Counts of what `ChangeSet.persist_all` wrote."""

    symlinks: int = 0
    files: int = 0
    descriptors: int = 0
    skipped: int = 0


def _remove_existing(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


@dataclass
class ChangeSet:
    """Append-only collection of planned filesystem mutations."""

    symlinks: List[SymlinkEdge] = field(default_factory=list)
    files: List[GeneratedFileEdge] = field(default_factory=list)
    descriptors: List[PackageDescriptorEdge] = field(default_factory=list)

    def add_symlink(self, symlink: SymlinkEdge) -> None:
        self.symlinks.append(symlink)

    def add_many_symlinks(self, symlinks: Iterable[SymlinkEdge]) -> None:
        self.symlinks.extend(symlinks)

    def add_file(self, file: GeneratedFileEdge) -> None:
        self.files.append(file)

    def add_many_files(self, files: Iterable[GeneratedFileEdge]) -> None:
        self.files.extend(files)

    def add_descriptor(self, descriptor: PackageDescriptorEdge) -> None:
        self.descriptors.append(descriptor)

    def merge(self, other: "ChangeSet") -> None:
        """Append every edge of `other`, keeping its emission order."""
        self.add_many_symlinks(other.symlinks)
        self.add_many_files(other.files)
        self.descriptors.extend(other.descriptors)

    def is_empty(self) -> bool:
        return not (self.symlinks or self.files or self.descriptors)

    def add_base_path(self, base_path: Union[str, Path]) -> None:
        """Anchor every workspace-relative path at `base_path`."""
        for symlink in self.symlinks:
            symlink.add_base_path(base_path)
        for file in self.files:
            file.add_base_path(base_path)
        for descriptor in self.descriptors:
            descriptor.add_base_path(base_path)

    def persist_all(self) -> PersistSummary:
        """Write every planned mutation to the filesystem.

        Not transactional: an OSError stops the apply and propagates, leaving
        what was already written. Every write is idempotent, so re-running is
        safe.
        """
        summary = PersistSummary()
        for symlink in self.symlinks:
            symlink.write()
            summary.symlinks += 1
        for file in self.files:
            if file.write():
                summary.files += 1
            else:
                summary.skipped += 1
        for descriptor in self.descriptors:
            if descriptor.write():
                summary.descriptors += 1
            else:
                summary.skipped += 1
        logger.info(
            "Persisted %d symlinks, %d generated files, %d package descriptors (%d kept)",
            summary.symlinks,
            summary.files,
            summary.descriptors,
            summary.skipped,
        )
        return summary


__all__ = [
    "ChangeSet",
    "GeneratedFileEdge",
    "PackageDescriptorEdge",
    "PersistSummary",
    "SymlinkEdge",
]
