"""Per-platform capabilities for the validation pipeline.

The pipeline (scan → probe → aggregate → classify) is shared; what
differs between Linux and Windows is bundled into a PlatformSupport
value chosen once from the detected OS.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set

from nativedeps.bootstrap.elevation import is_root_user
from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.bootstrap.platform import PlatformInfo, is_supported_windows_version
from nativedeps.catalog.loader import NativeDepsCatalog, build_package_mapping
from nativedeps.core.logging import get_logger
from nativedeps.core.models import ValidationOutcome
from nativedeps.core.subprocess_runner import DEFAULT_TIMEOUT
from nativedeps.validation.classifier import LinuxClassifier, WindowsClassifier
from nativedeps.validation.prober import LinuxProber, WindowsProber

LOGGER = get_logger(__name__)

ProbeFn = Callable[[Path], List[str]]


@dataclass(frozen=True)
class PlatformSupport:
    """What the validation pipeline needs to know about one OS.

    Attributes:
        os_name: Normalized OS name, also used for shared library naming.
        make_prober: Builds the probe for a set of validated directories.
        classify: Turns the aggregated missing set into an outcome.
        checks_dlopen: Whether runtime-loaded libraries are checked
            against the linker cache.
    """

    os_name: str
    make_prober: Callable[[Sequence[Path]], ProbeFn]
    classify: Callable[[Set[str]], ValidationOutcome]
    checks_dlopen: bool = False


def linux_support(
    catalog: NativeDepsCatalog,
    host_platform: str,
    sdk_language: str = "python",
    probe_timeout: int = DEFAULT_TIMEOUT,
    use_sudo: Optional[bool] = None,
) -> PlatformSupport:
    """Build Linux support: ldd probing, apt package resolution."""
    platform_deps = catalog.platform(host_platform)
    if platform_deps is None:
        LOGGER.debug(f"No catalog entry for {host_platform}; missing libraries stay unresolved")
    mapping = build_package_mapping(platform_deps.lib2package if platform_deps else None)
    classifier = LinuxClassifier(
        mapping,
        sdk_language=sdk_language,
        use_sudo=not is_root_user() if use_sudo is None else use_sudo,
    )

    def make_prober(directories: Sequence[Path]) -> ProbeFn:
        return LinuxProber(directories, timeout=probe_timeout).probe

    return PlatformSupport(
        os_name="linux",
        make_prober=make_prober,
        classify=classifier.classify,
        checks_dlopen=True,
    )


def windows_support(
    paths: NativeDepsPaths,
    supported: bool,
    probe_timeout: int = DEFAULT_TIMEOUT,
) -> PlatformSupport:
    """Build Windows support: PrintDeps.exe probing, CRT/media buckets."""
    classifier = WindowsClassifier(supported)

    def make_prober(directories: Sequence[Path]) -> ProbeFn:
        return WindowsProber(paths.print_deps_exe, timeout=probe_timeout).probe

    return PlatformSupport(
        os_name="windows",
        make_prober=make_prober,
        classify=classifier.classify,
    )


def select_platform_support(
    platform_info: PlatformInfo,
    catalog: NativeDepsCatalog,
    host_platform: str,
    sdk_language: str = "python",
    paths: Optional[NativeDepsPaths] = None,
    probe_timeout: int = DEFAULT_TIMEOUT,
) -> Optional[PlatformSupport]:
    """Pick the capabilities for the detected OS.

    Returns None on platforms without native dependency validation (macOS).
    """
    if platform_info.is_linux:
        return linux_support(catalog, host_platform, sdk_language, probe_timeout)
    if platform_info.is_windows:
        return windows_support(
            paths or NativeDepsPaths.default(),
            supported=is_supported_windows_version(platform_info),
            probe_timeout=probe_timeout,
        )
    return None
