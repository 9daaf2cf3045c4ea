"""Binary candidate discovery.

Finds the files in a directory worth handing to the dependency prober:
shared libraries (by naming convention) and executables (by mode bits).
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import List, Union

from nativedeps.core.errors import CandidateScanError
from nativedeps.core.logging import get_logger

LOGGER = get_logger(__name__)

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def is_shared_library(basename: str, os_name: str) -> bool:
    """Check a file name against the platform's shared library convention.

    Args:
        basename: File name without directory.
        os_name: Normalized OS name (linux, windows, darwin).
    """
    name = basename.lower()
    if os_name == "linux":
        return name.endswith(".so") or ".so." in name
    if os_name == "windows":
        return name.endswith(".dll")
    return False


def is_executable(mode: int) -> bool:
    """Check whether any of the owner/group/world execute bits is set."""
    return bool(mode & _EXECUTE_BITS)


def executables_or_shared_libraries(
    directory: Union[str, Path],
    os_name: str,
) -> List[Path]:
    """List the binaries in a directory that should be probed.

    Entries are stat'ed following symlinks; only regular files are kept.

    Args:
        directory: Directory to scan (not recursive).
        os_name: Normalized OS name used for the shared library check.

    Returns:
        Absolute paths, sorted by file name.

    Raises:
        CandidateScanError: If the directory cannot be listed or an entry
            cannot be stat'ed.
    """
    root = Path(directory).resolve()
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise CandidateScanError(f"Cannot list directory {root}: {e}") from e

    candidates: List[Path] = []
    for entry in entries:
        try:
            st = os.stat(entry)
        except OSError as e:
            raise CandidateScanError(f"Cannot stat {entry}: {e}") from e

        if not stat.S_ISREG(st.st_mode):
            continue
        if is_shared_library(entry.name, os_name) or is_executable(st.st_mode):
            candidates.append(entry)

    LOGGER.debug(f"Found {len(candidates)} binaries in {root}")
    return candidates
