"""Typed configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from nativedeps.core.models import DependencyGroup
from nativedeps.core.subprocess_runner import DEFAULT_TIMEOUT
from nativedeps.validation.aggregator import DEFAULT_MAX_WORKERS


@dataclass
class ValidationConfig:
    """Settings for `nativedeps validate`."""

    directories: List[str] = field(default_factory=list)
    dlopen_libraries: List[str] = field(default_factory=list)
    sdk_language: str = "python"
    max_workers: int = DEFAULT_MAX_WORKERS
    probe_timeout: int = DEFAULT_TIMEOUT


@dataclass
class InstallConfig:
    """Settings for `nativedeps install-deps`."""

    groups: List[DependencyGroup] = field(default_factory=lambda: list(DependencyGroup))


@dataclass
class CatalogConfig:
    """Where the native dependency catalog comes from."""

    path: Optional[Path] = None
    host_platform: Optional[str] = None


@dataclass
class NativeDepsConfig:
    """Complete nativedeps configuration."""

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    # Populated by the loader for diagnostics
    _config_sources: List[str] = field(default_factory=list, repr=False)
