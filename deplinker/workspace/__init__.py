"""Workspace state read by the link engine."""

from deplinker.workspace.context import PolicyQuery, SaveDependenciesAnswer, WorkspaceContext
from deplinker.workspace.manifest import load_manifest, parse_manifest
from deplinker.workspace.snapshots import ComponentSnapshot, SnapshotStore

__all__ = [
    "ComponentSnapshot",
    "PolicyQuery",
    "SaveDependenciesAnswer",
    "SnapshotStore",
    "WorkspaceContext",
    "load_manifest",
    "parse_manifest",
]
