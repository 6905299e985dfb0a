"""Persisted component snapshots.

A snapshot is the last saved state of a component's dependency relations,
including the relative paths and custom-resolve details the custom
module-resolution repair pass needs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from deplinker.errors import ManifestError
from deplinker.model.component import Dependency, RelativePath
from deplinker.model.ids import ComponentId

logger = logging.getLogger("deplinker.workspace.snapshots")


@dataclass
class ComponentSnapshot:
    """Stored dependency state of one component."""

    id: ComponentId
    dependencies: List[Dependency] = field(default_factory=list)
    dev_dependencies: List[Dependency] = field(default_factory=list)

    def get_all_dependencies(self) -> List[Dependency]:
        return [*self.dependencies, *self.dev_dependencies]


def dependency_to_dict(dependency: Dependency) -> Dict[str, Any]:
    return {
        "id": dependency.id.to_string(),
        "relative_paths": [
            {
                "source_relative_path": rp.source_relative_path,
                "destination_relative_path": rp.destination_relative_path,
                "is_custom_resolve_used": rp.is_custom_resolve_used,
                "import_source": rp.import_source,
            }
            for rp in dependency.relative_paths
        ],
    }


def dependency_from_dict(data: Dict[str, Any]) -> Dependency:
    try:
        return Dependency(
            id=ComponentId.parse(data["id"]),
            relative_paths=[
                RelativePath(
                    source_relative_path=rp["source_relative_path"],
                    destination_relative_path=rp["destination_relative_path"],
                    is_custom_resolve_used=bool(rp.get("is_custom_resolve_used", False)),
                    import_source=rp.get("import_source"),
                )
                for rp in data.get("relative_paths", [])
            ],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ManifestError(f"Invalid dependency entry {data!r}: {e}") from e


class SnapshotStore:
    """JSON snapshot files under a directory, one per component version."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, component_id: ComponentId) -> Path:
        name = component_id.to_slot_name()
        if component_id.version:
            name = f"{name}@{component_id.version}"
        return self.root / f"{name}.json"

    def save(self, snapshot: ComponentSnapshot) -> Path:
        path = self.path_for(snapshot.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "id": snapshot.id.to_string(),
            "dependencies": [dependency_to_dict(d) for d in snapshot.dependencies],
            "dev_dependencies": [dependency_to_dict(d) for d in snapshot.dev_dependencies],
        }
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        logger.debug("Saved snapshot of %s to %s", snapshot.id, path)
        return path

    def load(self, component_id: ComponentId) -> Optional[ComponentSnapshot]:
        """Load the snapshot of `component_id`.

        Returns:
            The snapshot, or None when none was ever persisted.

        Raises:
            ManifestError: If the snapshot file is not valid JSON or misses fields.
        """
        path = self.path_for(component_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No snapshot for %s at %s", component_id, path)
            return None

        try:
            data = json.loads(text)
            return ComponentSnapshot(
                id=ComponentId.parse(data["id"]),
                dependencies=[dependency_from_dict(d) for d in data.get("dependencies", [])],
                dev_dependencies=[
                    dependency_from_dict(d) for d in data.get("dev_dependencies", [])
                ],
            )
        except ManifestError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ManifestError(f"Invalid snapshot {path}: {e}") from e


__all__ = ["ComponentSnapshot", "SnapshotStore"]
