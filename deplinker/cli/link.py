"""Link command implementation."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from deplinker.errors import LinkError, ManifestError
from deplinker.links.planner import LinkPlanner
from deplinker.links.reporter import LinkReport, report_to_dict
from deplinker.runtime.config_loader import load_workspace_config
from deplinker.workspace.context import WorkspaceContext
from deplinker.workspace.manifest import load_manifest

logger = logging.getLogger("deplinker.cli.link")

RECOVERABLE_LINK_ERRORS = (
    LinkError,
    ManifestError,
    OSError,
    ValidationError,
    ValueError,
)


def link_command(args, console: Optional[Console] = None) -> int:
    """Execute link command.

    Args:
        args: Parsed command-line arguments.
        console: Console the report table is printed to.

    Returns:
        int: Exit code.
    """
    try:
        return _link_command_impl(args, console or Console())
    except RECOVERABLE_LINK_ERRORS as e:
        logger.error("Link failed: %s", e, exc_info=getattr(args, "verbose", False))
        return 1


def _link_command_impl(args, console: Console) -> int:
    workspace = Path(getattr(args, "workspace", None) or ".").expanduser().resolve()
    if not workspace.is_dir():
        logger.error("Workspace %s is not a directory", workspace)
        return 1

    config = load_workspace_config(workspace, getattr(args, "config", None))
    manifest_arg = getattr(args, "manifest", None)
    manifest_path = Path(manifest_arg) if manifest_arg else workspace / config.manifest_path
    logger.debug("Workspace: %s", workspace)
    logger.debug("Manifest: %s", manifest_path)

    component_map, components = load_manifest(manifest_path)
    context = WorkspaceContext(workspace, component_map, config=config)
    planner = LinkPlanner(
        components,
        context=context,
        max_workers=getattr(args, "workers", None),
    )

    start_time = time.time()
    if getattr(args, "dry_run", False):
        planner.get_links()
        report = planner.get_links_results()
        logger.info("Dry run: nothing was written")
    else:
        report = planner.link()
    logger.info("Linked %d components in %.2fs", len(report), time.time() - start_time)

    _print_report(console, report, dry_run=getattr(args, "dry_run", False))

    json_output = getattr(args, "json_output", None)
    if json_output:
        output_path = Path(json_output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(report_to_dict(report), indent=2) + "\n", encoding="utf-8"
        )
        logger.info("Report written to %s", output_path)
    return 0


def _print_report(console: Console, report: LinkReport, dry_run: bool = False) -> None:
    title = "Planned links" if dry_run else "Linked components"
    table = Table(title=title)
    table.add_column("Component")
    table.add_column("From")
    table.add_column("To")
    for component_id, bindings in report.items():
        if not bindings:
            table.add_row(component_id.to_string(), "-", "-")
            continue
        for index, binding in enumerate(bindings):
            name = component_id.to_string() if index == 0 else ""
            table.add_row(name, binding.from_path, binding.to)
    console.print(table)
