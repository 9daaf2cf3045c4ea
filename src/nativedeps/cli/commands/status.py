"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nativedeps.config.models import NativeDepsConfig

from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.bootstrap.platform import (
    PlatformInfo,
    get_host_platform,
    get_platform_info,
    is_supported_windows_version,
)
from nativedeps.catalog.loader import load_catalog
from nativedeps.cli.commands import Command
from nativedeps.cli.exit_codes import EXIT_SUCCESS
from nativedeps.config.models import NativeDepsConfig
from nativedeps.core.errors import CatalogError
from nativedeps.core.models import DependencyGroup


class StatusCommand(Command):
    """Shows platform detection and catalog coverage for this host."""

    def __init__(
        self,
        version: str,
        platform_info: Optional[PlatformInfo] = None,
        paths: Optional[NativeDepsPaths] = None,
    ):
        """Initialize StatusCommand.

        Args:
            version: Current nativedeps version string.
            platform_info: Platform to report on (detected if omitted).
            paths: Filesystem locations (defaults if omitted).
        """
        self._version = version
        self._platform_info = platform_info
        self._paths = paths

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "NativeDepsConfig | None" = None) -> int:
        """Execute the status command.

        Returns:
            Exit code (always 0 for status).
        """
        config = config or NativeDepsConfig()
        platform_info = self._platform_info or get_platform_info()
        paths = self._paths or NativeDepsPaths.default()
        host_platform = config.catalog.host_platform or get_host_platform(platform_info)

        print(f"nativedeps version: {self._version}")
        print(f"Platform: {platform_info.os}-{platform_info.arch}")
        print(f"Host platform: {host_platform}")
        if platform_info.is_windows:
            supported = is_supported_windows_version(platform_info)
            print(f"Windows version supported: {'yes' if supported else 'no'}")
        print(f"Helper binaries: {paths.bin_dir}")
        print()

        try:
            catalog = load_catalog(config.catalog.path)
        except CatalogError as e:
            print(f"Catalog: error loading ({e})")
            return EXIT_SUCCESS

        deps = catalog.platform(host_platform)
        if deps is None:
            print(f"Catalog: no entry for {host_platform}")
            print(f"  Known platforms: {', '.join(catalog.platforms())}")
            return EXIT_SUCCESS

        print(f"Catalog entry for {host_platform}:")
        for group in DependencyGroup:
            print(f"  {group.value}: {len(deps.libraries(group))} package(s)")
        print(f"  library mappings: {len(deps.lib2package)}")

        return EXIT_SUCCESS
