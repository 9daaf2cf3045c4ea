"""Configuration loading for nativedeps."""

from nativedeps.config.loader import ConfigError, load_config
from nativedeps.config.models import (
    CatalogConfig,
    InstallConfig,
    NativeDepsConfig,
    ValidationConfig,
)

__all__ = [
    "ConfigError",
    "load_config",
    "CatalogConfig",
    "InstallConfig",
    "NativeDepsConfig",
    "ValidationConfig",
]
