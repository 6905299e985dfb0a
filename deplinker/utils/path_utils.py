"""Path normalization utilities for link planning.

All paths the link engine plans with are workspace-relative and use
forward slashes, whatever the host platform, so that plans and reports
compare equal across machines.
"""

import os
import posixpath
from pathlib import Path
from typing import Union

from deplinker.model.ids import ComponentId


def path_normalize_to_linux(path: Union[Path, str]) -> str:
    """Replace backslashes with forward slashes.

    Examples:
        >>> path_normalize_to_linux("components\\\\a\\\\index.js")
        'components/a/index.js'
    """
    return str(path).replace("\\", "/")


def path_relative_linux(from_path: str, to_path: str) -> str:
    """Relative path between two absolute POSIX paths, with forward slashes."""
    return path_normalize_to_linux(posixpath.relpath(to_path, from_path))


def path_relative_regardless_cwd(
    from_path: Union[Path, str], to_path: Union[Path, str]
) -> str:
    """
    Compute the relative path from `from_path` to `to_path`.

    Both paths are anchored under a synthetic root before the computation,
    so the process working directory never leaks into the result (a user may
    run the tool from any directory inside the workspace).

    Args:
        from_path: Workspace-relative start directory.
        to_path: Workspace-relative target.

    Returns:
        Forward-slash relative path.

    Examples:
        >>> path_relative_regardless_cwd("node_modules/@bit/s.a/bar", "bar/foo.js")
        '../../../../bar/foo.js'
    """
    from_linux = path_normalize_to_linux(from_path).lstrip("/")
    to_linux = path_normalize_to_linux(to_path).lstrip("/")
    return path_relative_linux(f"/{from_linux}", f"/{to_linux}")


def get_packages_path_of_component(
    binding_prefix: str,
    component_id: ComponentId,
    packages_dir: str = "node_modules",
) -> str:
    """
    Return the package-resolution slot of a component.

    Examples:
        >>> get_packages_path_of_component("@bit", ComponentId("ui/button", "s"))
        'node_modules/@bit/s.ui.button'
    """
    return posixpath.join(
        path_normalize_to_linux(packages_dir),
        path_normalize_to_linux(binding_prefix),
        component_id.to_slot_name(),
    )


def join_base_path(base_path: Union[Path, str], path: str) -> str:
    """
    Prefix a workspace-relative path with the workspace root.

    Absolute paths are returned unchanged.

    Examples:
        >>> join_base_path("/ws", "node_modules/@bit/s.a")
        '/ws/node_modules/@bit/s.a'
    """
    if os.path.isabs(path):
        return path
    return os.path.join(str(base_path), path)
