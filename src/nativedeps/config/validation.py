"""Configuration validation for nativedeps.

Unknown keys produce warnings (with a suggestion when one is close);
values of the wrong type produce errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from nativedeps.catalog.loader import SDK_LANGUAGES
from nativedeps.core.logging import get_logger
from nativedeps.core.models import DependencyGroup

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config will fail at runtime
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "validation",
    "install",
    "catalog",
}

VALID_VALIDATION_KEYS: Set[str] = {
    "directories",
    "dlopen_libraries",
    "sdk_language",
    "max_workers",
    "probe_timeout",
}

VALID_INSTALL_KEYS: Set[str] = {
    "groups",
}

VALID_CATALOG_KEYS: Set[str] = {
    "path",
    "host_platform",
}

_SECTION_KEYS: Dict[str, Set[str]] = {
    "validation": VALID_VALIDATION_KEYS,
    "install": VALID_INSTALL_KEYS,
    "catalog": VALID_CATALOG_KEYS,
}


def _suggest_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    matches = get_close_matches(key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _check_unknown_keys(
    data: Dict[str, Any],
    valid_keys: Set[str],
    source: str,
    prefix: str,
    issues: List[ConfigValidationIssue],
) -> None:
    for key in data:
        if key not in valid_keys:
            full_key = f"{prefix}{key}"
            issues.append(ConfigValidationIssue(
                message=f"Unknown config key '{full_key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=full_key,
                suggestion=_suggest_key(str(key), valid_keys),
            ))


def _error(message: str, source: str, key: str) -> ConfigValidationIssue:
    return ConfigValidationIssue(
        message=message,
        source=source,
        severity=ValidationSeverity.ERROR,
        key=key,
    )


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _validate_validation_section(
    section: Dict[str, Any],
    source: str,
    issues: List[ConfigValidationIssue],
) -> None:
    for key in ("directories", "dlopen_libraries"):
        if key in section and not _is_string_list(section[key]):
            issues.append(_error(f"'validation.{key}' must be a list of strings", source, f"validation.{key}"))

    sdk_language = section.get("sdk_language")
    if sdk_language is not None and sdk_language not in SDK_LANGUAGES:
        issue = _error(
            f"Invalid sdk_language '{sdk_language}'. "
            f"Valid values: {', '.join(sorted(SDK_LANGUAGES))}",
            source,
            "validation.sdk_language",
        )
        issue.suggestion = _suggest_key(str(sdk_language), set(SDK_LANGUAGES))
        issues.append(issue)

    for key in ("max_workers", "probe_timeout"):
        value = section.get(key)
        # bool is an int subclass; reject it explicitly
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
            issues.append(_error(f"'validation.{key}' must be a positive integer", source, f"validation.{key}"))


def _validate_install_section(
    section: Dict[str, Any],
    source: str,
    issues: List[ConfigValidationIssue],
) -> None:
    groups = section.get("groups")
    if groups is None:
        return
    if not _is_string_list(groups):
        issues.append(_error("'install.groups' must be a list of strings", source, "install.groups"))
        return
    valid_groups = {group.value for group in DependencyGroup}
    for group in groups:
        if group.lower() not in valid_groups:
            issue = _error(
                f"Unknown dependency group '{group}'. Valid groups: {', '.join(sorted(valid_groups))}",
                source,
                "install.groups",
            )
            issue.suggestion = _suggest_key(group.lower(), valid_groups)
            issues.append(issue)


def _validate_catalog_section(
    section: Dict[str, Any],
    source: str,
    issues: List[ConfigValidationIssue],
) -> None:
    for key in ("path", "host_platform"):
        value = section.get(key)
        if value is not None and not isinstance(value, str):
            issues.append(_error(f"'catalog.{key}' must be a string", source, f"catalog.{key}"))


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Does not raise; callers decide what to do with ERROR issues.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of validation issues.
    """
    issues: List[ConfigValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(ConfigValidationIssue(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            severity=ValidationSeverity.ERROR,
        ))
        return issues

    _check_unknown_keys(data, VALID_TOP_LEVEL_KEYS, source, "", issues)

    validators = {
        "validation": _validate_validation_section,
        "install": _validate_install_section,
        "catalog": _validate_catalog_section,
    }
    for section_name, valid_keys in _SECTION_KEYS.items():
        section = data.get(section_name)
        if section is None:
            continue
        if not isinstance(section, dict):
            issues.append(_error(f"'{section_name}' must be a mapping", source, section_name))
            continue
        _check_unknown_keys(section, valid_keys, source, f"{section_name}.", issues)
        validators[section_name](section, source, issues)

    for issue in issues:
        if issue.severity == ValidationSeverity.WARNING:
            LOGGER.warning(f"{source}: {issue.message}")

    return issues


def validate_config_file(path: Path) -> Tuple[bool, List[ConfigValidationIssue]]:
    """Validate a configuration file on disk.

    Returns:
        Tuple of (is_valid, issues); is_valid is False if any ERROR exists.
    """
    source = str(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [ConfigValidationIssue(
            message=f"Invalid YAML: {e}",
            source=source,
            severity=ValidationSeverity.ERROR,
        )]

    if data is None:
        return True, []

    issues = validate_config(data, source)
    is_valid = not any(issue.severity == ValidationSeverity.ERROR for issue in issues)
    return is_valid, issues
