"""Workspace manifest: the JSON record of tracked components.

The manifest is what the CLI links from. Every entry is both a component
map record (where the component lives, how it got there) and a component
to link (its dependencies, dists and recorded link issues).

Example:

    {
      "components": [
        {
          "id": "remote/utils/is-string@0.0.1",
          "origin": "imported",
          "root_dir": "components/utils/is-string",
          "files": ["index.js"],
          "main_file": "index.js",
          "dependencies": [{"id": "remote/utils/is-type@0.0.1"}]
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from deplinker.errors import ManifestError
from deplinker.model.component import (
    DEFAULT_BINDING_PREFIX,
    Component,
    ComponentIssues,
    Dependency,
    Dists,
    RelativePath,
)
from deplinker.model.component_map import ComponentMap, ComponentMapEntry
from deplinker.model.ids import ComponentId

logger = logging.getLogger("deplinker.workspace.manifest")


def _check_id(v: str) -> str:
    ComponentId.parse(v)
    return v


class RelativePathModel(BaseModel):
    source_relative_path: str
    destination_relative_path: str
    is_custom_resolve_used: bool = False
    import_source: Optional[str] = None

    model_config = {"extra": "allow"}


class DependencyModel(BaseModel):
    id: str
    relative_paths: List[RelativePathModel] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _check_id(v)

    def to_dependency(self) -> Dependency:
        return Dependency(
            id=ComponentId.parse(self.id),
            relative_paths=[
                RelativePath(
                    source_relative_path=rp.source_relative_path,
                    destination_relative_path=rp.destination_relative_path,
                    is_custom_resolve_used=rp.is_custom_resolve_used,
                    import_source=rp.import_source,
                )
                for rp in self.relative_paths
            ],
        )


class DistsModel(BaseModel):
    entries: List[str] = Field(default_factory=list)
    write_dists_files: bool = True

    model_config = {"extra": "allow"}


class IssuesModel(BaseModel):
    missing_links: Dict[str, List[str]] = Field(default_factory=dict)
    missing_custom_module_resolution_links: Dict[str, List[str]] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @field_validator("missing_links", "missing_custom_module_resolution_links")
    @classmethod
    def validate_ids(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        for ids in v.values():
            for raw in ids:
                _check_id(raw)
        return v

    def to_issues(self) -> ComponentIssues:
        def parse(mapping: Dict[str, List[str]]) -> Dict[str, List[ComponentId]]:
            return {
                file_name: [ComponentId.parse(raw) for raw in ids]
                for file_name, ids in mapping.items()
            }

        return ComponentIssues(
            missing_links=parse(self.missing_links),
            missing_custom_module_resolution_links=parse(
                self.missing_custom_module_resolution_links
            ),
        )


class ComponentModel(BaseModel):
    """One manifest entry.

    `origin` is kept as a plain string; an unknown origin fails when the
    component is linked, not when the manifest is read.
    """

    id: str
    origin: str
    root_dir: Optional[str] = None
    track_dir: Optional[str] = None
    files: List[str] = Field(default_factory=list)
    main_file: Optional[str] = None
    binding_prefix: str = DEFAULT_BINDING_PREFIX
    written_path: Optional[str] = None
    dependencies: List[DependencyModel] = Field(default_factory=list)
    dev_dependencies: List[DependencyModel] = Field(default_factory=list)
    package_dependencies: Dict[str, str] = Field(default_factory=dict)
    dists: DistsModel = Field(default_factory=DistsModel)
    issues: IssuesModel = Field(default_factory=IssuesModel)

    model_config = {"extra": "allow"}

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _check_id(v)

    def to_map_entry(self) -> ComponentMapEntry:
        return ComponentMapEntry(
            id=ComponentId.parse(self.id),
            origin=self.origin,
            root_dir=self.root_dir,
            track_dir=self.track_dir,
            files=list(self.files),
            main_file=self.main_file,
        )

    def to_component(self) -> Component:
        return Component(
            id=ComponentId.parse(self.id),
            dependencies=[d.to_dependency() for d in self.dependencies],
            dev_dependencies=[d.to_dependency() for d in self.dev_dependencies],
            dists=Dists(
                entries=list(self.dists.entries),
                write_dists_files=self.dists.write_dists_files,
            ),
            binding_prefix=self.binding_prefix,
            written_path=self.written_path,
            package_dependencies=dict(self.package_dependencies),
            issues=self.issues.to_issues(),
        )


class WorkspaceManifest(BaseModel):
    components: List[ComponentModel] = Field(default_factory=list)

    model_config = {"extra": "allow"}


def parse_manifest(data: object) -> Tuple[ComponentMap, List[Component]]:
    """Build the component map and the components to link from manifest data.

    Raises:
        ManifestError: If the data does not match the manifest schema.
    """
    try:
        manifest = WorkspaceManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid workspace manifest: {e}") from e

    component_map = ComponentMap(entry.to_map_entry() for entry in manifest.components)
    components = [entry.to_component() for entry in manifest.components]
    logger.debug("Manifest lists %d components", len(components))
    return component_map, components


def load_manifest(path: Path) -> Tuple[ComponentMap, List[Component]]:
    """Load a workspace manifest file.

    Args:
        path: Path of the JSON manifest.

    Returns:
        Tuple of the component map and the components to link.

    Raises:
        ManifestError: If the file is not valid JSON or fails validation.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in manifest {path}: {e}") from e
    logger.info("Loaded workspace manifest %s", path)
    return parse_manifest(data)


__all__ = ["WorkspaceManifest", "load_manifest", "parse_manifest"]
