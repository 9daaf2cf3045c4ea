"""Native dependency catalog.

Per-platform lists of packages each dependency group needs, plus the
library → package mapping used to turn missing libraries into an
install command.
"""

from nativedeps.catalog.loader import (
    build_install_helper_command,
    build_package_mapping,
    load_catalog,
    MANUAL_LIBRARY_TO_PACKAGE_NAME_UBUNTU,
    NativeDepsCatalog,
    PlatformDeps,
)

__all__ = [
    "build_install_helper_command",
    "build_package_mapping",
    "load_catalog",
    "MANUAL_LIBRARY_TO_PACKAGE_NAME_UBUNTU",
    "NativeDepsCatalog",
    "PlatformDeps",
]
