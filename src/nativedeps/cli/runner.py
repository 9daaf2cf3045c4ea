"""CLI runner orchestration.

This module handles command dispatch and execution for the nativedeps CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from nativedeps.cli.arguments import build_parser
from nativedeps.cli.config_bridge import ConfigBridge
from nativedeps.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from nativedeps.cli.commands.install_deps import InstallDepsCommand
from nativedeps.cli.commands.status import StatusCommand
from nativedeps.cli.commands.validate import ValidateCommand
from nativedeps.config import load_config
from nativedeps.config.loader import ConfigError
from nativedeps.config.models import NativeDepsConfig
from nativedeps.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get nativedeps version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("nativedeps")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from nativedeps import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        """Initialize CLIRunner with parser and commands."""
        self.parser = build_parser()
        self._version = get_version()
        self.validate_cmd = ValidateCommand()
        self.install_cmd = InstallDepsCommand()
        self.status_cmd = StatusCommand(version=self._version)

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None

        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 for --help and 2 for bad arguments
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        # Handle --version
        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command == "validate":
            return self._dispatch(self.validate_cmd, args)
        elif command == "install-deps":
            return self._dispatch(self.install_cmd, args)
        elif command == "status":
            return self._dispatch(self.status_cmd, args)
        else:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

    def _load_config(self, args) -> NativeDepsConfig:
        cli_overrides = ConfigBridge.args_to_overrides(args)
        return load_config(
            project_root=Path.cwd(),
            cli_config_path=getattr(args, "config", None),
            cli_overrides=cli_overrides,
        )

    def _dispatch(self, cmd, args) -> int:
        """Load configuration and run a command.

        Args:
            cmd: Command to execute.
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        try:
            config = self._load_config(args)
            return cmd.execute(args, config)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
        except ValueError as e:
            # Unknown group names or bad worker counts from the command line
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
