"""Component identifiers.

A ComponentId is the structural key of a component: `scope/name@version`.
The scope is absent until the component has been exported at least once.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

VERSION_DELIMITER = "@"
SCOPE_DELIMITER = "/"
SLOT_SEPARATOR = "."


@dataclass(frozen=True)
class ComponentId:
    """Immutable, hashable component identifier.

    Attributes:
        name: Component name, may itself contain `/` (e.g. `ui/button`).
        scope: Remote scope the component was exported to, if any.
        version: Version string, if pinned.
    """

    name: str
    scope: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def parse(cls, raw: str, has_scope: bool = True) -> "ComponentId":
        """Parse `scope/name@version` into a ComponentId.

        Args:
            raw: String form of the id.
            has_scope: Whether the first path segment is the scope. Ids of
                never-exported components are written without one.

        Returns:
            ComponentId: Parsed identifier.

        Raises:
            ValueError: If the name part is empty.
        """
        text = raw.strip()
        version: Optional[str] = None
        # a leading "@" belongs to an npm-style scope, not to the version
        at = text.rfind(VERSION_DELIMITER)
        if at > 0:
            text, version = text[:at], text[at + 1 :] or None

        scope: Optional[str] = None
        if has_scope and SCOPE_DELIMITER in text:
            scope, text = text.split(SCOPE_DELIMITER, 1)

        if not text:
            raise ValueError(f"Invalid component id: {raw!r}")
        return cls(name=text, scope=scope or None, version=version)

    def has_scope(self) -> bool:
        return bool(self.scope)

    def has_version(self) -> bool:
        return bool(self.version)

    def change_version(self, version: Optional[str]) -> "ComponentId":
        return replace(self, version=version)

    def without_version(self) -> "ComponentId":
        return replace(self, version=None)

    def is_equal_without_version(self, other: "ComponentId") -> bool:
        return self.scope == other.scope and self.name == other.name

    def to_string_without_version(self) -> str:
        if self.scope:
            return f"{self.scope}{SCOPE_DELIMITER}{self.name}"
        return self.name

    def to_string(self) -> str:
        base = self.to_string_without_version()
        if self.version:
            return f"{base}{VERSION_DELIMITER}{self.version}"
        return base

    def to_slot_name(self) -> str:
        """Return the directory name used inside the binding prefix.

        `scope/ui/button` becomes `scope.ui.button`.
        """
        parts = [self.scope] if self.scope else []
        parts.append(self.name.replace(SCOPE_DELIMITER, SLOT_SEPARATOR))
        return SLOT_SEPARATOR.join(parts)

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["ComponentId"]
