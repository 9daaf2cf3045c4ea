"""Path management for nativedeps.

Handles the ~/.nativedeps directory (global configuration) and the
bundled helper directory holding PrintDeps.exe and install_media_pack.ps1.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".nativedeps"

# Environment variables to override locations
NATIVEDEPS_HOME_ENV = "NATIVEDEPS_HOME"
NATIVEDEPS_BIN_DIR_ENV = "NATIVEDEPS_BIN_DIR"

# Helper directory shipped inside the package
PACKAGE_BIN_DIR = Path(__file__).resolve().parent.parent / "bin"


def get_nativedeps_home() -> Path:
    """Get the nativedeps home directory path.

    Resolution order:
    1. NATIVEDEPS_HOME environment variable (if set)
    2. ~/.nativedeps (default)
    """
    env_home = os.environ.get(NATIVEDEPS_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def get_bin_directory() -> Path:
    """Get the directory holding bundled helper binaries and scripts.

    Resolution order:
    1. NATIVEDEPS_BIN_DIR environment variable (if set)
    2. The bin/ directory inside the installed package
    """
    env_bin = os.environ.get(NATIVEDEPS_BIN_DIR_ENV)
    if env_bin:
        return Path(env_bin)
    return PACKAGE_BIN_DIR


@dataclass
class NativeDepsPaths:
    """Resolves paths used by nativedeps.

    Directory structure:
        ~/.nativedeps/
            config/config.yml       - Global configuration
        <bin_dir>/
            PrintDeps.exe           - Windows dependency walker
            install_media_pack.ps1  - Windows media feature installer
    """

    home: Path
    bin_dir: Path = field(default_factory=get_bin_directory)

    _CONFIG_DIR: ClassVar[str] = "config"
    _GLOBAL_CONFIG_NAME: ClassVar[str] = "config.yml"
    _PRINT_DEPS_EXE: ClassVar[str] = "PrintDeps.exe"
    _MEDIA_PACK_SCRIPT: ClassVar[str] = "install_media_pack.ps1"

    @classmethod
    def default(cls) -> "NativeDepsPaths":
        """Create paths from the default home and bin directories."""
        return cls(get_nativedeps_home(), get_bin_directory())

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files."""
        return self.home / self._CONFIG_DIR

    @property
    def global_config(self) -> Path:
        """Path to the global configuration file."""
        return self.config_dir / self._GLOBAL_CONFIG_NAME

    @property
    def print_deps_exe(self) -> Path:
        """Path to the Windows dependency walker."""
        return self.bin_dir / self._PRINT_DEPS_EXE

    @property
    def media_pack_script(self) -> Path:
        return self.bin_dir / self._MEDIA_PACK_SCRIPT
