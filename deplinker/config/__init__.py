"""Configuration schema and validation for deplinker."""

from .schema import LinkerConfig

__all__ = [
    "LinkerConfig",
]
