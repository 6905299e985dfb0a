"""Helpers for loading linker configuration from TOML/JSON sources.

Two entry points:

* `load_linker_config(source)` reads one explicit source: None, a dict, a
  `.toml`/`.json` file or an inline TOML/JSON string.
* `load_workspace_config(workspace, source)` is what the CLI uses: an
  explicit source wins, otherwise the first workspace config file found
  (`deplinker.toml`, `deplinker.json`) is read, otherwise defaults apply.

Settings may sit at the top level, under a `[deplinker]` table, or under
`[tool.deplinker]` when they share a file with other tools.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from deplinker.config import LinkerConfig

logger = logging.getLogger("deplinker.runtime.config_loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]

CONFIG_SECTION = "deplinker"
WORKSPACE_CONFIG_FILES = ("deplinker.toml", "deplinker.json")

_TOML_SUFFIXES = {".toml", ".tml"}


def _select_section(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the linker settings out of a possibly shared configuration mapping."""
    section = data.get(CONFIG_SECTION)
    if isinstance(section, dict):
        return section
    tool = data.get("tool")
    if isinstance(tool, dict) and isinstance(tool.get(CONFIG_SECTION), dict):
        return tool[CONFIG_SECTION]
    return data


def _looks_like_json(text: str) -> bool:
    return text.lstrip().startswith(("{", "["))


def _read_source(source: Union[str, Path]) -> Tuple[str, str, str]:
    """Return (text, format, description) for a file path or inline string."""
    path = Path(source)
    if path.is_file():
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in _TOML_SUFFIXES:
            fmt = "toml"
        elif path.suffix.lower() == ".json":
            fmt = "json"
        else:
            fmt = "json" if _looks_like_json(text) else "toml"
        return text, fmt, str(path)

    text = str(source)
    return text, "json" if _looks_like_json(text) else "toml", "inline string"


def load_linker_config(source: ConfigSource) -> LinkerConfig:
    """Load LinkerConfig from one configuration source.

    Args:
        source: None for defaults, an already-parsed mapping, a path to a
            `.toml`/`.json` file, or an inline TOML/JSON string.

    Returns:
        LinkerConfig instance.

    Raises:
        ValueError: If the parsed top level is not a mapping.
        TypeError: If `source` is of an unsupported type.
        ValidationError: If a setting is invalid.
    """
    if source is None:
        logger.debug("No config source provided; using default LinkerConfig")
        return LinkerConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading LinkerConfig from provided dict")
        return LinkerConfig.from_dict(_select_section(source))

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    text, fmt, origin = _read_source(source)
    logger.info("Loading %s configuration from %s", fmt, origin)
    data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Top-level configuration must be a mapping/dict")
    return LinkerConfig.from_dict(_select_section(data))


def find_workspace_config(workspace: Path) -> Optional[Path]:
    """Return the first workspace configuration file present, if any."""
    for name in WORKSPACE_CONFIG_FILES:
        candidate = Path(workspace) / name
        if candidate.is_file():
            return candidate
    return None


def load_workspace_config(workspace: Path, source: ConfigSource = None) -> LinkerConfig:
    """Load the configuration a link run in `workspace` should use.

    An explicit `source` takes precedence over workspace discovery.
    """
    if source is not None:
        return load_linker_config(source)
    discovered = find_workspace_config(workspace)
    if discovered is None:
        logger.debug("No workspace configuration under %s; using defaults", workspace)
        return LinkerConfig.default()
    logger.debug("Using workspace configuration %s", discovered)
    return load_linker_config(discovered)


__all__ = [
    "CONFIG_SECTION",
    "WORKSPACE_CONFIG_FILES",
    "find_workspace_config",
    "load_linker_config",
    "load_workspace_config",
]
