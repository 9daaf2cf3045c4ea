"""Install-deps command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nativedeps.config.models import NativeDepsConfig

from nativedeps.bootstrap.platform import PlatformInfo, get_host_platform, get_platform_info
from nativedeps.catalog.loader import load_catalog
from nativedeps.cli.commands import Command
from nativedeps.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from nativedeps.config.models import NativeDepsConfig
from nativedeps.core.errors import CatalogError, InstallationError
from nativedeps.core.logging import get_logger
from nativedeps.core.models import InstallationRequest
from nativedeps.install.installer import install_dependencies

LOGGER = get_logger(__name__)


class InstallDepsCommand(Command):
    """Installs the system packages needed by dependency groups."""

    def __init__(self, platform_info: Optional[PlatformInfo] = None):
        self._platform_info = platform_info

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install-deps"

    def execute(self, args: Namespace, config: "NativeDepsConfig | None" = None) -> int:
        """Execute the install-deps command.

        Groups come from the command line, then from config, and default
        to every group.

        Returns:
            Exit code: 0 = installed (or dry run), 2 = install failed,
            3 = usage error.
        """
        config = config or NativeDepsConfig()
        request = InstallationRequest(
            groups=frozenset(config.install.groups),
            dry_run=getattr(args, "dry_run", False),
        )

        platform_info = self._platform_info or get_platform_info()
        try:
            catalog = load_catalog(config.catalog.path)
        except CatalogError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        try:
            install_dependencies(
                request,
                platform_info=platform_info,
                catalog=catalog,
                host_platform=config.catalog.host_platform or get_host_platform(platform_info),
            )
        except InstallationError as e:
            LOGGER.error(str(e))
            return EXIT_RUNTIME_ERROR

        return EXIT_SUCCESS
