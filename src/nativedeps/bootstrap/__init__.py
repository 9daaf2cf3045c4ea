"""Bootstrap module for nativedeps.

This module handles:
- Platform detection (OS, architecture, host distribution, Windows version)
- Path resolution (~/.nativedeps/, bundled helper directory)
- Privilege elevation for package manager commands
"""

from nativedeps.bootstrap.platform import (
    get_host_platform,
    get_platform_info,
    is_supported_windows_version,
    PlatformInfo,
)
from nativedeps.bootstrap.paths import get_nativedeps_home, NativeDepsPaths
from nativedeps.bootstrap.elevation import transform_commands_for_root, ElevatedCommand

__all__ = [
    "get_host_platform",
    "get_platform_info",
    "is_supported_windows_version",
    "PlatformInfo",
    "get_nativedeps_home",
    "NativeDepsPaths",
    "transform_commands_for_root",
    "ElevatedCommand",
]
