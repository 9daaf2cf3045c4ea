"""Package manager installer.

Installs the native dependencies of the requested dependency groups:
apt-get on Linux, a bundled PowerShell script on Windows. In dry-run
mode the command line is printed instead of executed.
"""

from __future__ import annotations

import subprocess
from typing import Iterable, List, Optional

from nativedeps.bootstrap.elevation import transform_commands_for_root
from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.bootstrap.platform import PlatformInfo, get_host_platform, get_platform_info
from nativedeps.catalog.loader import NativeDepsCatalog, load_catalog
from nativedeps.core.errors import InstallationError
from nativedeps.core.formatting import format_command_line
from nativedeps.core.logging import get_logger
from nativedeps.core.models import DependencyGroup, InstallationRequest
from nativedeps.core.subprocess_runner import run_inherited

LOGGER = get_logger(__name__)

POWERSHELL = "powershell.exe"


def _ordered_groups(groups: Iterable[DependencyGroup]) -> List[DependencyGroup]:
    wanted = set(groups)
    return [group for group in DependencyGroup if group in wanted]


def _spawn(command: str, args: List[str], cwd=None) -> None:
    try:
        code = run_inherited([command, *args], cwd=cwd)
    except subprocess.SubprocessError as e:
        raise InstallationError(str(e)) from e
    if code != 0:
        raise InstallationError(f"{command} exited with code {code}", returncode=code)


def install_dependencies_windows(
    groups: Iterable[DependencyGroup],
    dry_run: bool = False,
    paths: Optional[NativeDepsPaths] = None,
) -> None:
    """Install the Windows media feature pack when chromium is requested.

    Raises:
        InstallationError: If the script cannot run or exits non-zero.
    """
    if DependencyGroup.CHROMIUM not in set(groups):
        LOGGER.debug("No Windows dependencies to install for the requested groups")
        return

    paths = paths or NativeDepsPaths.default()
    args = ["-ExecutionPolicy", "Bypass", "-File", str(paths.media_pack_script)]
    if dry_run:
        print(format_command_line(POWERSHELL, args))
        return

    try:
        _spawn(POWERSHELL, args, cwd=paths.bin_dir)
    except InstallationError as e:
        raise InstallationError("Failed to install windows dependencies!", returncode=e.returncode) from e


def install_dependencies_linux(
    groups: Iterable[DependencyGroup],
    dry_run: bool = False,
    catalog: Optional[NativeDepsCatalog] = None,
    host_platform: Optional[str] = None,
) -> None:
    """Install the apt packages of the requested groups.

    Unknown distributions get a warning and nothing is installed.

    Raises:
        InstallationError: If apt-get cannot run or exits non-zero.
    """
    catalog = catalog or load_catalog()
    host_platform = host_platform or get_host_platform()

    info = catalog.platform(host_platform)
    if info is None:
        LOGGER.warning("Cannot install dependencies for this linux distribution!")
        return

    libraries: List[str] = []
    for group in _ordered_groups(groups):
        libraries.extend(info.libraries(group))
    unique_libraries = list(dict.fromkeys(libraries))

    if not dry_run:
        print("Installing Ubuntu dependencies...")

    commands = [
        "apt-get update",
        " ".join(["apt-get", "install", "-y", "--no-install-recommends", *unique_libraries]),
    ]
    elevated = transform_commands_for_root(commands)
    if dry_run:
        print(format_command_line(elevated.command, elevated.args))
        return

    if elevated.elevated:
        print("Switching to root user to install dependencies...")
    _spawn(elevated.command, elevated.args)


def install_dependencies(
    request: InstallationRequest,
    platform_info: Optional[PlatformInfo] = None,
    catalog: Optional[NativeDepsCatalog] = None,
    host_platform: Optional[str] = None,
    paths: Optional[NativeDepsPaths] = None,
) -> None:
    """Install dependencies for the detected operating system."""
    info = platform_info or get_platform_info()
    if info.is_windows:
        install_dependencies_windows(request.groups, request.dry_run, paths=paths)
    elif info.is_linux:
        install_dependencies_linux(
            request.groups,
            request.dry_run,
            catalog=catalog,
            host_platform=host_platform or get_host_platform(info),
        )
    else:
        LOGGER.warning(f"Installing dependencies is not supported on {info.os}")
