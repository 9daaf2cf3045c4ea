"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.nativedeps.yml)
- Global config (~/.nativedeps/config/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.config.models import (
    CatalogConfig,
    InstallConfig,
    NativeDepsConfig,
    ValidationConfig,
)
from nativedeps.config.validation import ValidationSeverity, validate_config
from nativedeps.core.errors import NativeDepsError
from nativedeps.core.logging import get_logger
from nativedeps.core.models import DependencyGroup

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".nativedeps.yml", ".nativedeps.yaml", "nativedeps.yml", "nativedeps.yaml"]
# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(NativeDepsError):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> NativeDepsConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.nativedeps.yml)
    3. Global config (~/.nativedeps/config/config.yml)
    4. Built-in defaults

    Raises:
        ConfigError: If a specified config file doesn't exist, has parse
            errors, or fails validation.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path and global_path.exists():
        try:
            global_dict = load_yaml_file(global_path)
            _check(global_dict, global_path)
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (ConfigError, yaml.YAMLError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        config_path: Optional[Path] = cli_config_path
        label = "custom"
    else:
        config_path = find_project_config(project_root)
        label = "project"

    if config_path and config_path.exists():
        try:
            project_dict = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        _check(project_dict, config_path)
        project_dict = _resolve_relative_paths(project_dict, config_path.parent)
        merged = merge_configs(merged, project_dict)
        sources.append(f"{label}:{config_path}")
        LOGGER.debug(f"Loaded {label} config from {config_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _check(data: Dict[str, Any], path: Path) -> None:
    errors = [
        issue for issue in validate_config(data, source=str(path))
        if issue.severity == ValidationSeverity.ERROR
    ]
    if errors:
        details = "; ".join(issue.message for issue in errors)
        raise ConfigError(f"Invalid configuration in {path}: {details}")


def _resolve_relative_paths(data: Dict[str, Any], base: Path) -> Dict[str, Any]:
    """Make directory and catalog paths relative to the config file."""
    result = dict(data)
    validation = result.get("validation")
    if isinstance(validation, dict) and validation.get("directories"):
        validation = dict(validation)
        validation["directories"] = [str(base / d) for d in validation["directories"]]
        result["validation"] = validation
    catalog = result.get("catalog")
    if isinstance(catalog, dict) and catalog.get("path"):
        catalog = dict(catalog)
        catalog["path"] = str(base / catalog["path"])
        result["catalog"] = catalog
    return result


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Searches for .nativedeps.yml, .nativedeps.yaml, nativedeps.yml,
    nativedeps.yaml in the project root directory.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Find global config at ~/.nativedeps/config/config.yml."""
    config_path = NativeDepsPaths.default().global_config
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in config values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> NativeDepsConfig:
    """Convert a validated dict to a typed NativeDepsConfig."""
    defaults = ValidationConfig()
    validation_data = data.get("validation", {})
    validation = ValidationConfig(
        directories=list(validation_data.get("directories", [])),
        dlopen_libraries=list(validation_data.get("dlopen_libraries", [])),
        sdk_language=validation_data.get("sdk_language", defaults.sdk_language),
        max_workers=validation_data.get("max_workers", defaults.max_workers),
        probe_timeout=validation_data.get("probe_timeout", defaults.probe_timeout),
    )

    install_data = data.get("install", {})
    if "groups" in install_data:
        install = InstallConfig(groups=[DependencyGroup.parse(g) for g in install_data["groups"]])
    else:
        install = InstallConfig()

    catalog_data = data.get("catalog", {})
    catalog_path = catalog_data.get("path")
    catalog = CatalogConfig(
        path=Path(catalog_path) if catalog_path else None,
        host_platform=catalog_data.get("host_platform"),
    )

    return NativeDepsConfig(validation=validation, install=install, catalog=catalog)


def get_default_config() -> NativeDepsConfig:
    """Get default configuration."""
    return NativeDepsConfig()
