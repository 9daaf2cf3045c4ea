"""Native dependency validation.

Public entry points:
- validate_dependencies: auto-select by detected OS
- validate_dependencies_linux / validate_dependencies_windows
- DependencyValidator: the pipeline, parameterized by PlatformSupport
"""

from nativedeps.validation.platforms import PlatformSupport, select_platform_support
from nativedeps.validation.validator import (
    DependencyValidator,
    validate_dependencies,
    validate_dependencies_linux,
    validate_dependencies_windows,
)

__all__ = [
    "PlatformSupport",
    "select_platform_support",
    "DependencyValidator",
    "validate_dependencies",
    "validate_dependencies_linux",
    "validate_dependencies_windows",
]
