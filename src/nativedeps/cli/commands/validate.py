"""Validate command implementation.

Checks that the host provides every shared library required by the
binaries in the configured directories.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nativedeps.config.models import NativeDepsConfig

from nativedeps.bootstrap.platform import PlatformInfo, get_host_platform, get_platform_info
from nativedeps.catalog.loader import load_catalog
from nativedeps.cli.commands import Command
from nativedeps.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_MISSING_DEPENDENCIES,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from nativedeps.config.models import NativeDepsConfig
from nativedeps.core.errors import CandidateScanError, CatalogError, MissingDependenciesError
from nativedeps.core.logging import get_logger
from nativedeps.core.models import OutcomeKind
from nativedeps.validation.validator import validate_dependencies

LOGGER = get_logger(__name__)


class ValidateCommand(Command):
    """Validates binaries against the host's shared libraries."""

    def __init__(self, platform_info: Optional[PlatformInfo] = None):
        self._platform_info = platform_info

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace, config: "NativeDepsConfig | None" = None) -> int:
        """Execute the validate command.

        Args:
            args: Parsed command-line arguments.
            config: Effective configuration (CLI overrides already applied).

        Returns:
            Exit code: 0 = satisfied or warned, 1 = missing dependencies,
            2 = a directory could not be scanned, 3 = usage error.
        """
        config = config or NativeDepsConfig()
        settings = config.validation

        if not settings.directories:
            LOGGER.error("No directories to validate. Pass DIR arguments or set validation.directories.")
            return EXIT_INVALID_USAGE

        platform_info = self._platform_info or get_platform_info()
        try:
            catalog = load_catalog(config.catalog.path)
        except CatalogError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        try:
            outcome = validate_dependencies(
                [Path(d) for d in settings.directories],
                dlopen_libraries=settings.dlopen_libraries,
                sdk_language=settings.sdk_language,
                platform_info=platform_info,
                catalog=catalog,
                host_platform=config.catalog.host_platform or get_host_platform(platform_info),
                max_workers=settings.max_workers,
                probe_timeout=settings.probe_timeout,
                sequential=getattr(args, "sequential", False),
            )
        except MissingDependenciesError as e:
            print(str(e), file=sys.stderr)
            return EXIT_MISSING_DEPENDENCIES
        except CandidateScanError as e:
            LOGGER.error(str(e))
            return EXIT_RUNTIME_ERROR

        if outcome.kind == OutcomeKind.SATISFIED:
            LOGGER.info("Host system provides all required libraries")
        return EXIT_SUCCESS
