"""Platform detection for nativedeps.

Detects OS and architecture, the catalog key of the host distribution,
and whether the running Windows version is supported.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from nativedeps.core.logging import get_logger

LOGGER = get_logger(__name__)

# Supported operating systems (lowercase)
SUPPORTED_OS = frozenset({"darwin", "linux", "windows"})

# Supported architectures (normalized)
SUPPORTED_ARCH = frozenset({"amd64", "arm64"})

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

# Windows 7 reports 6.1; anything at or below it is unsupported.
_WINDOWS_VERSION_FLOOR = (6, 1)

GENERIC_LINUX = "generic-linux"

# Distribution ids get_host_platform can return, before any "-arm64" suffix
LINUX_DISTRIBUTION_IDS = (
    "ubuntu18.04",
    "ubuntu20.04",
    "ubuntu22.04",
    "ubuntu24.04",
    "debian11",
    "debian12",
)


def normalize_arch(machine: str) -> Optional[str]:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string or None if unknown.
    """
    return _ARCH_MAP.get(machine.lower())


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin, linux, windows).

    Raises:
        ValueError: If the OS is not supported.
    """
    system = platform.system().lower()
    if system not in SUPPORTED_OS:
        raise ValueError(
            f"Unsupported operating system: {platform.system()}. "
            f"Supported: {', '.join(sorted(SUPPORTED_OS))}"
        )
    return system


def detect_arch() -> str:
    """Detect the current CPU architecture.

    Returns:
        Normalized architecture string (amd64 or arm64).

    Raises:
        ValueError: If the architecture is not supported.
    """
    machine = platform.machine()
    normalized = normalize_arch(machine)
    if normalized is None:
        raise ValueError(
            f"Unsupported architecture: {machine}. "
            f"Supported: {', '.join(sorted(SUPPORTED_ARCH))}"
        )
    return normalized


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform.

    Attributes:
        os: Operating system (darwin, linux, windows).
        arch: CPU architecture (amd64, arm64).
    """

    os: str
    arch: str

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def is_supported(self) -> bool:
        """Check if this platform is supported."""
        return self.os in SUPPORTED_OS and self.arch in SUPPORTED_ARCH


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information.

    Raises:
        ValueError: If the platform is not supported.
    """
    return PlatformInfo(os=detect_os(), arch=detect_arch())


def parse_windows_version(release: str) -> Tuple[int, int]:
    """Extract (major, minor) from a Windows version string like "10.0.19045".

    Missing or non-numeric components are treated as 0.
    """
    tokens = release.strip().split(".")
    numbers = []
    for token in tokens[:2]:
        try:
            numbers.append(int(token))
        except ValueError:
            numbers.append(0)
    while len(numbers) < 2:
        numbers.append(0)
    return numbers[0], numbers[1]


def is_supported_windows_version(
    platform_info: Optional[PlatformInfo] = None,
    release: Optional[str] = None,
) -> bool:
    """Check whether this host is a supported 64-bit Windows.

    Supported means x64 and a version above Windows 7 (6.1), i.e.
    major > 6, or major == 6 and minor > 1.

    Args:
        platform_info: Platform to check (detected if omitted).
        release: Windows version string (platform.version() if omitted).
    """
    info = platform_info or get_platform_info()
    if info.os != "windows" or info.arch != "amd64":
        return False
    major, minor = parse_windows_version(release if release is not None else platform.version())
    floor_major, floor_minor = _WINDOWS_VERSION_FLOOR
    return major > floor_major or (major == floor_major and minor > floor_minor)


def _read_os_release() -> Dict[str, str]:
    try:
        return platform.freedesktop_os_release()
    except OSError as e:
        LOGGER.debug(f"Could not read os-release: {e}")
        return {}


def _version_tuple(version: str) -> Tuple[int, ...]:
    parts = []
    for token in version.split("."):
        if not token.isdigit():
            break
        parts.append(int(token))
    return tuple(parts)


def _linux_distribution_id(os_release: Dict[str, str]) -> str:
    distro_id = os_release.get("ID", "").lower()
    version = _version_tuple(os_release.get("VERSION_ID", ""))
    if distro_id == "ubuntu" and version:
        if version <= (19, 4):
            return "ubuntu18.04"
        if version <= (21, 4):
            return "ubuntu20.04"
        if version < (23,):
            return "ubuntu22.04"
        return "ubuntu24.04"
    if distro_id == "debian" and version:
        candidate = f"debian{version[0]}"
        if candidate in LINUX_DISTRIBUTION_IDS:
            return candidate
    return GENERIC_LINUX


def get_host_platform(
    platform_info: Optional[PlatformInfo] = None,
    os_release: Optional[Dict[str, str]] = None,
) -> str:
    """Return the catalog key identifying this host.

    Examples: "ubuntu22.04", "ubuntu20.04-arm64", "debian12",
    "generic-linux", "win64", "mac14-arm64".

    Args:
        platform_info: Platform to describe (detected if omitted).
        os_release: Parsed /etc/os-release (read if omitted, Linux only).
    """
    info = platform_info or get_platform_info()
    arch_suffix = "-arm64" if info.arch == "arm64" else ""

    if info.os == "linux":
        release = os_release if os_release is not None else _read_os_release()
        return _linux_distribution_id(release) + arch_suffix

    if info.os == "windows":
        return "win64"

    mac_version = platform.mac_ver()[0]
    major = mac_version.split(".")[0] if mac_version else ""
    return f"mac{major}{arch_suffix}"
