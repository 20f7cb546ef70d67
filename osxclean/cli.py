"""Command-line entry point: uninstall applications, clean junk, check the version."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from osxclean import logger, version
from osxclean.orchestrator import clean_my_mac
from osxclean.uninstaller import CliTool, MacApp

PROG = "osx"
DESCRIPTION = "🚀 macOS application and system cleaner"

_BOLD = "\033[1m"
_BRIGHT_GREEN = "\033[92m"
_BRIGHT_RED = "\033[91m"
_RESET = "\033[0m"

_BANNER_EDGE_TOP = "  " + "/\\" * 33
_BANNER_EDGE_BOTTOM = "  " + "\\/" * 33
_BANNER_BLANK = " <|                                                                |>"
_BANNER_TITLE = "---=[ o s x - c l e a n e r ]=---"


def _style(text: str, *codes: str) -> str:
    if os.environ.get("NO_COLOR") is not None:
        return text
    return f"{''.join(codes)}{text}{_RESET}"


def _split_commas(value: str) -> list[str]:
    return value.split(",")


def _global_flags(parser: argparse.ArgumentParser, default: object) -> None:
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=default,
        help="Show what would be deleted without deleting",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=default,
        help="Print debug messages",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; ``--dry-run`` and ``--debug`` work before or after a command."""
    parser = argparse.ArgumentParser(prog=PROG, description=DESCRIPTION)
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"{PROG} {version.get_local_version()}",
    )
    _global_flags(parser, False)

    # Subcommands accept the same flags but must not reset values given earlier.
    shared = argparse.ArgumentParser(add_help=False)
    _global_flags(shared, argparse.SUPPRESS)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    uninstall = commands.add_parser(
        "uninstall",
        parents=[shared],
        help="Uninstall a macOS app or CLI tool",
    )
    uninstall.add_argument("name", help="Name of the app or binary to uninstall")

    clean = commands.add_parser(
        "clean-my-mac",
        parents=[shared],
        help="Clean junk files from system locations",
    )
    clean.add_argument(
        "-i",
        "--ignore",
        action="extend",
        type=_split_commas,
        default=[],
        help="Comma-separated files/directories to ignore (may be repeated)",
    )

    commands.add_parser(
        "version",
        parents=[shared],
        help="Show the version of the tool and check for a newer release",
    )
    return parser


def _uninstall(name: str, dry_run: bool) -> None:
    logger.info(f"🔧 Attempting to uninstall '{name}'")
    for label, target in (("app", MacApp(name)), ("CLI tool", CliTool(name))):
        try:
            target.uninstall(dry_run)
        except OSError as exc:
            logger.warn(f"Failed to uninstall {label} '{name}': {exc}")
        else:
            logger.info(f"Successfully uninstalled {label} '{name}'")


def _print_banner() -> None:
    green = (_BOLD, _BRIGHT_GREEN)
    lines = [
        "\n",
        _style(_BANNER_EDGE_TOP, *green),
        _style(_BANNER_BLANK, *green),
        _style(" <|                ", *green)
        + _style(_BANNER_TITLE, _BOLD, _BRIGHT_RED)
        + _style("               |>", *green),
        _style(_BANNER_BLANK, *green),
        _style(_BANNER_EDGE_BOTTOM, *green),
        "\n",
        _style("                     🚚 Starting Cleanup Process...                   ", _BRIGHT_RED, _BOLD),
        _style("-" * 70, _BOLD),
    ]
    for line in lines:
        print(line, file=sys.stderr)


def _clean(dry_run: bool, ignore: list[str]) -> None:
    _print_banner()
    try:
        clean_my_mac(dry_run, ignore)
    except Exception as exc:  # any failure is reported, the command still ends normally
        logger.error(f"Clean-up failed: {exc}")
        return
    if dry_run:
        logger.info("Estimated (Dry Run) clean-up completed.")
    else:
        logger.info("Clean-up completed successfully.")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = build_parser().parse_args(argv)
    logger.init(args.debug)
    logger.debug(f"Starting with dry_run = {str(args.dry_run).lower()}")

    if args.command == "uninstall":
        _uninstall(args.name, args.dry_run)
    elif args.command == "clean-my-mac":
        _clean(args.dry_run, list(args.ignore))
    elif args.command == "version":
        logger.debug("[main] 'Version' subcommand detected. Calling version.run().")
        version.run()

    logger.debug("Finished execution.")
    return 0


if __name__ == "__main__":
    sys.exit(main())