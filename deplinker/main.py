"""Main CLI entry point for deplinker.

Provides commands: link
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from deplinker.cli.link import link_command

logger = logging.getLogger("deplinker.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deplinker - link workspace components into node_modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    link_parser = subparsers.add_parser(
        "link",
        help="Link the workspace components and report what was bound",
    )
    link_parser.add_argument(
        "workspace",
        nargs="?",
        default=".",
        help="Workspace root (default: current directory)",
    )
    link_parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional link configuration. Can be a path to a TOML/JSON file or "
            "an inline TOML/JSON string. When omitted, <workspace>/deplinker.toml "
            "is used if present, built-in defaults otherwise."
        ),
    )
    link_parser.add_argument(
        "-m",
        "--manifest",
        help=(
            "Workspace manifest (JSON). Defaults to the configured manifest_path "
            "under the workspace."
        ),
    )
    link_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Plan and report links without writing anything",
    )
    link_parser.add_argument(
        "-o",
        "--json",
        dest="json_output",
        help="Write the link report as JSON to this file",
    )
    link_parser.add_argument(
        "-w",
        "--workers",
        type=int,
        help="Maximum concurrent planning workers (default: from configuration)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "link":
        return link_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
