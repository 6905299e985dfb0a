"""Public model API surface."""

from deplinker.model.component import (
    DEFAULT_BINDING_PREFIX,
    Component,
    ComponentIssues,
    Dependency,
    Dists,
    RelativePath,
)
from deplinker.model.component_map import ComponentMap, ComponentMapEntry, Origin
from deplinker.model.ids import ComponentId

__all__ = [
    "Component",
    "ComponentId",
    "ComponentIssues",
    "ComponentMap",
    "ComponentMapEntry",
    "DEFAULT_BINDING_PREFIX",
    "Dependency",
    "Dists",
    "Origin",
    "RelativePath",
]
