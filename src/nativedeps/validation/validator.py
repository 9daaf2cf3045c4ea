"""Native dependency validation pipeline.

scan directories → probe binaries concurrently → union results
(+ linker cache check on Linux) → classify → raise, warn, or return.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Union

from nativedeps.bootstrap.paths import NativeDepsPaths
from nativedeps.bootstrap.platform import (
    PlatformInfo,
    get_host_platform,
    get_platform_info,
    is_supported_windows_version,
)
from nativedeps.catalog.loader import NativeDepsCatalog, load_catalog
from nativedeps.core.errors import MissingDependenciesError
from nativedeps.core.logging import get_logger
from nativedeps.core.models import OutcomeKind, ValidationOutcome
from nativedeps.core.subprocess_runner import DEFAULT_TIMEOUT
from nativedeps.validation.aggregator import DEFAULT_MAX_WORKERS, DependencyAggregator
from nativedeps.validation.dlopen import check_dlopen_libraries
from nativedeps.validation.platforms import (
    PlatformSupport,
    linux_support,
    select_platform_support,
    windows_support,
)
from nativedeps.validation.scanner import executables_or_shared_libraries

LOGGER = get_logger(__name__)

PathLike = Union[str, Path]


class DependencyValidator:
    """Validates directories of binaries against the host's libraries."""

    def __init__(
        self,
        support: PlatformSupport,
        max_workers: int = DEFAULT_MAX_WORKERS,
        sequential: bool = False,
    ) -> None:
        self._support = support
        self._max_workers = max_workers
        self._sequential = sequential

    def find_candidates(self, directories: Sequence[Path]) -> List[Path]:
        """Scan every directory; any I/O failure aborts the whole scan."""
        candidates: List[Path] = []
        for directory in directories:
            candidates.extend(executables_or_shared_libraries(directory, self._support.os_name))
        return candidates

    def collect_missing(
        self,
        directories: Iterable[PathLike],
        dlopen_libraries: Sequence[str] = (),
    ) -> Set[str]:
        """Return the deduplicated set of unresolved libraries.

        Raises:
            CandidateScanError: If a directory cannot be scanned.
        """
        dirs = [Path(d) for d in directories]
        candidates = self.find_candidates(dirs)
        aggregator = DependencyAggregator(
            self._support.make_prober(dirs),
            max_workers=self._max_workers,
            sequential=self._sequential,
        )
        missing = aggregator.aggregate(candidates)

        if self._support.checks_dlopen:
            missing = aggregator.merge_dlopen(missing, check_dlopen_libraries(dlopen_libraries))
        elif dlopen_libraries:
            LOGGER.debug(f"Linker cache check not available on {self._support.os_name}")

        LOGGER.info(f"{len(missing)} missing libraries across {len(candidates)} binaries")
        return missing

    def classify(self, missing: Set[str]) -> ValidationOutcome:
        return self._support.classify(missing)

    def validate(
        self,
        directories: Iterable[PathLike],
        dlopen_libraries: Sequence[str] = (),
    ) -> ValidationOutcome:
        """Run the full pipeline.

        Returns:
            The outcome when dependencies are satisfied or only a warning
            was issued.

        Raises:
            MissingDependenciesError: If required libraries are missing.
            CandidateScanError: If a directory cannot be scanned.
        """
        outcome = self.classify(self.collect_missing(directories, dlopen_libraries))
        if outcome.is_fatal:
            raise MissingDependenciesError(outcome)
        if outcome.kind == OutcomeKind.WARNED_UNSUPPORTED_PLATFORM:
            LOGGER.warning("running on unsupported windows version!")
            LOGGER.warning(outcome.message)
        return outcome


def validate_dependencies_linux(
    sdk_language: str,
    directories: Iterable[PathLike],
    dlopen_libraries: Sequence[str] = (),
    catalog: Optional[NativeDepsCatalog] = None,
    host_platform: Optional[str] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    probe_timeout: int = DEFAULT_TIMEOUT,
) -> ValidationOutcome:
    """Validate Linux binaries; see DependencyValidator.validate."""
    support = linux_support(
        catalog or load_catalog(),
        host_platform or get_host_platform(),
        sdk_language=sdk_language,
        probe_timeout=probe_timeout,
    )
    return DependencyValidator(support, max_workers=max_workers).validate(directories, dlopen_libraries)


def validate_dependencies_windows(
    directories: Iterable[PathLike],
    paths: Optional[NativeDepsPaths] = None,
    supported: Optional[bool] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    probe_timeout: int = DEFAULT_TIMEOUT,
) -> ValidationOutcome:
    """Validate Windows binaries; see DependencyValidator.validate."""
    support = windows_support(
        paths or NativeDepsPaths.default(),
        supported=is_supported_windows_version() if supported is None else supported,
        probe_timeout=probe_timeout,
    )
    return DependencyValidator(support, max_workers=max_workers).validate(directories)


def validate_dependencies(
    directories: Iterable[PathLike],
    dlopen_libraries: Sequence[str] = (),
    sdk_language: str = "python",
    platform_info: Optional[PlatformInfo] = None,
    catalog: Optional[NativeDepsCatalog] = None,
    host_platform: Optional[str] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    probe_timeout: int = DEFAULT_TIMEOUT,
    sequential: bool = False,
) -> ValidationOutcome:
    """Validate on whatever platform this is running on.

    Platforms without native validation return a satisfied outcome.
    """
    info = platform_info or get_platform_info()
    support = select_platform_support(
        info,
        catalog or load_catalog(),
        host_platform or get_host_platform(info),
        sdk_language=sdk_language,
        probe_timeout=probe_timeout,
    )
    if support is None:
        LOGGER.debug(f"Native dependency validation is not needed on {info.os}")
        return ValidationOutcome.satisfied()
    validator = DependencyValidator(support, max_workers=max_workers, sequential=sequential)
    return validator.validate(directories, dlopen_libraries)
