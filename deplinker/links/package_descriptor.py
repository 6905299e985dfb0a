"""Package descriptors for authored components.

An authored component has no root directory to symlink, so its package
slot is populated file by file. A minimal `package.json` with a `main`
entry makes the slot requirable by its absolute name.
"""

import posixpath
from typing import Any, Dict, Optional

from deplinker.links.changeset import PackageDescriptorEdge
from deplinker.model.component import Component
from deplinker.utils.path_utils import path_normalize_to_linux

PACKAGE_JSON = "package.json"
DEFAULT_MAIN_FILE = "index.js"


def get_package_name(binding_prefix: str, component: Component) -> str:
    return f"{path_normalize_to_linux(binding_prefix)}/{component.id.to_slot_name()}"


def build_package_descriptor(
    component: Component,
    slot_dir: str,
    main_file: Optional[str] = None,
) -> PackageDescriptorEdge:
    """Return the descriptor for `component` at `<slot_dir>/package.json`.

    Args:
        component: The authored component.
        slot_dir: Workspace-relative package slot of the component.
        main_file: Workspace-relative main file. The slot mirrors workspace
            paths, so the same path is valid relative to the slot.
    """
    data: Dict[str, Any] = {
        "name": get_package_name(component.binding_prefix, component),
    }
    if component.id.version:
        data["version"] = component.id.version
    data["main"] = path_normalize_to_linux(main_file or DEFAULT_MAIN_FILE)
    if component.package_dependencies:
        data["dependencies"] = dict(sorted(component.package_dependencies.items()))
    return PackageDescriptorEdge(
        path=posixpath.join(slot_dir, PACKAGE_JSON),
        data=data,
        override=True,
    )


__all__ = ["PACKAGE_JSON", "build_package_descriptor", "get_package_name"]
