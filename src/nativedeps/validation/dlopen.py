"""Runtime-loaded library check.

Some libraries are opened with dlopen() at runtime and never show up in
ldd output. Their presence is checked against the dynamic linker cache
instead. The check is advisory: if the cache cannot be listed, nothing
is reported missing.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import FrozenSet, Sequence

from nativedeps.core.logging import get_logger
from nativedeps.core.subprocess_runner import run_tool

LOGGER = get_logger(__name__)

# Absolute path since /sbin is often missing from PATH (cron, containers)
LDCONFIG_PATH = "/sbin/ldconfig"


@dataclass(frozen=True)
class DlopenCheckResult:
    """Outcome of a linker cache lookup.

    Attributes:
        missing: Libraries absent from the cache.
        present: Libraries confirmed present in the cache.
    """

    missing: FrozenSet[str] = field(default_factory=frozenset)
    present: FrozenSet[str] = field(default_factory=frozenset)


def check_dlopen_libraries(
    libraries: Sequence[str],
    ldconfig: str = LDCONFIG_PATH,
) -> DlopenCheckResult:
    """Look up libraries in the ``ldconfig -p`` listing.

    Matching is a case-insensitive substring test against the whole
    listing. An empty input skips the query.
    """
    if not libraries:
        return DlopenCheckResult()

    try:
        result = run_tool([ldconfig, "-p"])
    except (subprocess.SubprocessError, OSError) as e:
        LOGGER.debug(f"Cannot list linker cache: {e}")
        return DlopenCheckResult()

    if result.returncode != 0:
        LOGGER.debug(f"{ldconfig} -p exited with {result.returncode}")
        return DlopenCheckResult()

    cache = result.stdout.lower()
    missing = frozenset(lib for lib in libraries if lib.lower() not in cache)
    present = frozenset(libraries) - missing
    if missing:
        LOGGER.debug(f"Not in linker cache: {', '.join(sorted(missing))}")
    return DlopenCheckResult(missing=missing, present=present)
