"""Argument parser construction for nativedeps CLI.

This module builds the argument parser with subcommands:
- nativedeps validate     - Check binaries against host shared libraries
- nativedeps install-deps - Install native packages for dependency groups
- nativedeps status       - Show platform and catalog information
"""

from __future__ import annotations

import argparse
from pathlib import Path

from nativedeps.catalog.loader import SDK_LANGUAGES
from nativedeps.core.models import DependencyGroup


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show nativedeps version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to a config file (default: .nativedeps.yml in the current directory).",
    )


def _build_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'validate' subcommand parser."""
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that the host provides every shared library the binaries need.",
        description=(
            "Scan directories for executables and shared libraries, probe "
            "each one for unresolved dependencies and report what is missing."
        ),
    )
    validate_parser.add_argument(
        "directories",
        nargs="*",
        metavar="DIR",
        help="Directories containing binaries to validate (default: from config).",
    )
    validate_parser.add_argument(
        "--dlopen-lib",
        dest="dlopen_libraries",
        action="append",
        metavar="LIB",
        help="Library loaded at runtime via dlopen that must be present (repeatable, Linux only).",
    )
    validate_parser.add_argument(
        "--sdk-language",
        choices=sorted(SDK_LANGUAGES),
        help="Language of the calling SDK, used in the install hint.",
    )
    validate_parser.add_argument(
        "--max-workers",
        type=int,
        metavar="N",
        help="Maximum number of concurrent probes.",
    )
    validate_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Probe binaries one at a time.",
    )
    _add_config_option(validate_parser)


def _build_install_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'install-deps' subcommand parser."""
    install_parser = subparsers.add_parser(
        "install-deps",
        help="Install system packages needed by the dependency groups.",
        description=(
            "Install the native packages required by the given dependency "
            "groups using the platform package manager."
        ),
    )
    install_parser.add_argument(
        "groups",
        nargs="*",
        metavar="GROUP",
        help=(
            "Dependency groups to install: "
            f"{', '.join(g.value for g in DependencyGroup)} (default: from config, else all)."
        ),
    )
    install_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the install command instead of running it.",
    )
    _add_config_option(install_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    subparsers.add_parser(
        "status",
        help="Show platform and catalog information.",
        description="Show nativedeps version, detected platform and catalog coverage.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for nativedeps CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="nativedeps",
        description="Validate and install native host dependencies for bundled binaries.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nativedeps validate ./browsers/chromium          # Check a directory
  nativedeps validate ./bin --dlopen-lib libx264.so
  nativedeps install-deps chromium --dry-run        # Show install command
  nativedeps status                                 # Platform information
""",
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    _build_validate_parser(subparsers)
    _build_install_parser(subparsers)
    _build_status_parser(subparsers)

    return parser
