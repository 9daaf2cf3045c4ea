"""Catalog loading and lookup.

The catalog is a YAML mapping keyed by host platform id:

    ubuntu22.04:
      tools: [xvfb, fonts-liberation]
      chromium: [libnss3, libgbm1]
      lib2package:
        libnss3.so: libnss3

It is read-only once loaded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import yaml

from nativedeps.core.errors import CatalogError
from nativedeps.core.logging import get_logger
from nativedeps.core.models import DependencyGroup

LOGGER = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "native_deps.yml"

LIB2PACKAGE_KEY = "lib2package"

# libgstlibav.so (the only library shipped by gstreamer1.0-libav) is not in the
# ldconfig cache, so the h.264 codec it pulls in is checked instead:
# gstreamer1.0-libav -> libavcodec -> libx264
MANUAL_LIBRARY_TO_PACKAGE_NAME_UBUNTU: Mapping[str, str] = MappingProxyType({
    "libx264.so": "gstreamer1.0-libav",
})

# Wrapper command per ecosystem; "{command}" is the subcommand to run
_INSTALL_HELPER_COMMANDS: Dict[str, str] = {
    "python": "nativedeps {command}",
    "javascript": "npx nativedeps {command}",
    "java": 'mvn exec:java -e -Dexec.mainClass=nativedeps.CLI -Dexec.args="{command}"',
    "csharp": "pwsh bin/nativedeps.ps1 {command}",
}

SDK_LANGUAGES = frozenset(_INSTALL_HELPER_COMMANDS)


@dataclass(frozen=True)
class PlatformDeps:
    """Catalog entry for one host platform."""

    groups: Mapping[str, List[str]] = field(default_factory=dict)
    lib2package: Mapping[str, str] = field(default_factory=dict)

    def libraries(self, group: DependencyGroup) -> List[str]:
        """Packages needed by a dependency group (empty if not listed)."""
        return list(self.groups.get(group.value, []))


class NativeDepsCatalog:
    """Lookup of platform id → PlatformDeps."""

    def __init__(self, entries: Mapping[str, PlatformDeps]) -> None:
        self._entries = dict(entries)

    def __contains__(self, platform_id: object) -> bool:
        return platform_id in self._entries

    def __getitem__(self, platform_id: str) -> PlatformDeps:
        return self._entries[platform_id]

    def platform(self, platform_id: str) -> Optional[PlatformDeps]:
        """Return the entry for a platform, or None when the catalog has none."""
        return self._entries.get(platform_id)

    def platforms(self) -> List[str]:
        return sorted(self._entries)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "<catalog>") -> "NativeDepsCatalog":
        """Build a catalog from parsed YAML data.

        Raises:
            CatalogError: If the structure is not as expected.
        """
        if not isinstance(data, Mapping):
            raise CatalogError(f"{source}: catalog must be a mapping, got {type(data).__name__}")

        valid_groups = {group.value for group in DependencyGroup}
        entries: Dict[str, PlatformDeps] = {}
        for platform_id, platform_data in data.items():
            if not isinstance(platform_data, Mapping):
                raise CatalogError(f"{source}: entry '{platform_id}' must be a mapping")

            groups: Dict[str, List[str]] = {}
            lib2package: Dict[str, str] = {}
            for key, value in platform_data.items():
                if key == LIB2PACKAGE_KEY:
                    if not isinstance(value, Mapping):
                        raise CatalogError(f"{source}: {platform_id}.{key} must be a mapping")
                    lib2package = {str(lib): str(pkg) for lib, pkg in value.items()}
                elif key in valid_groups:
                    if not isinstance(value, list):
                        raise CatalogError(f"{source}: {platform_id}.{key} must be a list")
                    groups[key] = [str(item) for item in value]
                else:
                    LOGGER.debug(f"{source}: ignoring unknown key {platform_id}.{key}")

            entries[str(platform_id)] = PlatformDeps(
                groups=MappingProxyType(groups),
                lib2package=MappingProxyType(lib2package),
            )
        return cls(entries)


def load_catalog(path: Optional[Path] = None) -> NativeDepsCatalog:
    """Load a catalog file (the bundled one by default).

    Raises:
        CatalogError: If the file cannot be read or parsed.
    """
    catalog_path = path or DEFAULT_CATALOG_PATH
    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {catalog_path}: {e}") from e

    catalog = NativeDepsCatalog.from_dict(data or {}, source=str(catalog_path))
    LOGGER.debug(f"Loaded catalog {catalog_path} ({len(catalog.platforms())} platforms)")
    return catalog


def build_package_mapping(catalog_mapping: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Merge the catalog's library → package mapping with manual overrides.

    Catalog entries come first; an override replaces the catalog value for
    the same library.
    """
    return {
        **(catalog_mapping or {}),
        **MANUAL_LIBRARY_TO_PACKAGE_NAME_UBUNTU,
    }


def build_install_helper_command(sdk_language: str, command: str) -> str:
    """Return the wrapper command a user of the given ecosystem should run.

    Raises:
        ValueError: If the ecosystem is unknown.
    """
    template = _INSTALL_HELPER_COMMANDS.get(sdk_language)
    if template is None:
        raise ValueError(
            f"Unsupported sdk language: {sdk_language}. "
            f"Supported: {', '.join(sorted(SDK_LANGUAGES))}"
        )
    return template.format(command=command)
