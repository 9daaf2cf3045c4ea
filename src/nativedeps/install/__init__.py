"""Installation of native dependencies through the platform package manager."""

from nativedeps.install.installer import (
    install_dependencies,
    install_dependencies_linux,
    install_dependencies_windows,
)

__all__ = [
    "install_dependencies",
    "install_dependencies_linux",
    "install_dependencies_windows",
]
