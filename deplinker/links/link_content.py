"""Content templates for generated redirect files.

A redirect file sits where the runtime expects a module and forwards to
the real file. Only file types with a known redirect syntax are
supported; everything else is linked with a plain symlink instead.
"""

import posixpath
from typing import Dict, Optional

LINKS_CONTENT_TEMPLATES: Dict[str, str] = {
    "js": "module.exports = require('{filePath}');",
    "jsx": "export * from '{filePath}';",
    "ts": "export * from '{filePath}';",
    "tsx": "export * from '{filePath}';",
    "css": "@import '{filePath}.css';",
    "scss": "@import '{filePath}.scss';",
    "sass": "@import '{filePath}.sass';",
    "less": "@import '{filePath}.less';",
    "vue": (
        "<script>\nmodule.exports = require('{filePath}.vue');\n</script>\n"
        "<style lang=\"scss\" scoped>\n@import '{filePath}.vue';\n</style>"
    ),
}

PACKAGE_LINK_TEMPLATES: Dict[str, str] = {
    "js": "module.exports = require('{packageName}');",
    "jsx": "export * from '{packageName}';",
    "ts": "export * from '{packageName}';",
    "tsx": "export * from '{packageName}';",
    "css": "@import '~{packageName}';",
    "scss": "@import '~{packageName}';",
    "sass": "@import '~{packageName}';",
    "less": "@import '~{packageName}';",
}


def get_file_extension(file_path: str) -> str:
    return posixpath.splitext(file_path)[1].lstrip(".").lower()


def get_link_to_file_content(file_path: str) -> Optional[str]:
    """Return redirect content pointing at `file_path`.

    Args:
        file_path: Forward-slash path of the target, relative to the
            directory of the redirect file.

    Returns:
        The file content, or None when the extension has no template.
    """
    ext = get_file_extension(file_path)
    template = LINKS_CONTENT_TEMPLATES.get(ext)
    if template is None:
        return None

    # the template decides whether the extension is written back
    target = posixpath.splitext(file_path)[0]
    if not target.startswith("."):
        target = f"./{target}"
    return template.format(filePath=target)


def get_link_to_package_content(file_path: str, package_name: str) -> Optional[str]:
    """Return redirect content for `file_path` that requires a whole package."""
    template = PACKAGE_LINK_TEMPLATES.get(get_file_extension(file_path))
    if template is None:
        return None
    return template.format(packageName=package_name)


__all__ = [
    "LINKS_CONTENT_TEMPLATES",
    "get_link_to_file_content",
    "get_link_to_package_content",
]
