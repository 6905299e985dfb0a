"""Exception hierarchy for the link engine.

Every error raised while planning links is fatal for the whole operation:
the planner lets it propagate before the ChangeSet is applied, so no
partial link set reaches the filesystem.
"""

from typing import Any, Optional


class LinkError(Exception):
    """Base class for fatal link-engine errors."""

    pass


class UnrecognizedOriginError(LinkError):
    """Raised when a component map records an origin the planner cannot dispatch."""

    def __init__(self, component_id: Any, origin: Any) -> None:
        self.component_id = component_id
        self.origin = origin
        super().__init__(
            f"ComponentMap.origin {origin!r} of {component_id} is not recognized"
        )


class MissingPolicyError(LinkError):
    """Raised when the batched policy query did not answer for a component."""

    def __init__(self, component_id: Any) -> None:
        self.component_id = component_id
        super().__init__(
            f"save-dependencies-as-components answer is missing for {component_id}"
        )


class MissingWorkspaceContextError(LinkError):
    """Raised when a planning step that needs the workspace context runs without one."""

    pass


class MissingComponentError(LinkError, KeyError):
    """Raised when a component-map lookup that must succeed finds nothing.

    Also a KeyError so callers treating the component map as a mapping can
    catch it the usual way.
    """

    def __init__(self, component_id: Any, reason: Optional[str] = None) -> None:
        self.component_id = component_id
        message = f"component {component_id} is not tracked in the component map"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class ManifestError(ValueError):
    """Raised when a workspace manifest or component snapshot is malformed."""

    pass


__all__ = [
    "LinkError",
    "ManifestError",
    "MissingComponentError",
    "MissingPolicyError",
    "MissingWorkspaceContextError",
    "UnrecognizedOriginError",
]
