"""Configuration schema definitions using Pydantic for validation.

The workspace configuration controls where component links are placed and
how build output is laid out. Using Pydantic ensures configuration errors
are caught early with clear error messages.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from deplinker.model.component import DEFAULT_BINDING_PREFIX


class LinkerConfig(BaseModel):
    """Workspace-level link configuration.

    Attributes:
        binding_prefix: Namespace segment all linked components live under.
        packages_dir: Name of the runtime's package-resolution directory.
        dists_inside_components: Whether dist output stays in `<root>/dist`.
        dist_target: Directory relocated dist output is written to.
        dist_entry: Root-directory prefix stripped when relocating dists.
        save_dependencies_as_components: Default answer of the
            "dependencies saved as components" policy.
        components_saved_as_packages: Component ids (without version) whose
            dependencies are treated as plain packages instead.
        max_workers: Maximum number of concurrent planning threads.
        snapshots_dir: Workspace-relative directory of component snapshots.
        manifest_path: Workspace-relative path of the component manifest.
    """

    binding_prefix: str = DEFAULT_BINDING_PREFIX
    packages_dir: str = "node_modules"
    dists_inside_components: bool = True
    dist_target: str = "dist"
    dist_entry: Optional[str] = None
    save_dependencies_as_components: bool = True
    components_saved_as_packages: List[str] = Field(default_factory=list)
    max_workers: int = Field(default=8, ge=1, le=64)
    snapshots_dir: str = ".deplinker/snapshots"
    manifest_path: str = ".deplinker/workspace.json"

    model_config = {"extra": "allow"}  # Allow extra fields for extensibility

    @field_validator("binding_prefix")
    @classmethod
    def validate_binding_prefix(cls, v: str) -> str:
        """Binding prefix must be a relative, non-empty path segment."""
        if not v or not v.strip():
            raise ValueError("binding_prefix must not be empty")
        if v.startswith("/") or v.startswith("\\"):
            raise ValueError(f"binding_prefix must be relative, got '{v}'")
        return v

    @field_validator("packages_dir", "dist_target")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        """Directory names must be non-empty."""
        if not v or not v.strip():
            raise ValueError("directory name must not be empty")
        return v

    @classmethod
    def default(cls) -> "LinkerConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinkerConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            LinkerConfig instance.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary.
        """
        return self.model_dump()
