"""Dependency probers.

A prober asks the platform's dynamic linker tooling which libraries a
binary needs but cannot resolve. Both variants share the same output
format (``name => not found``) and the same failure rule: when the tool
cannot run or exits non-zero, the binary is reported as having no
unresolved dependencies.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import List, Sequence

from nativedeps.core.logging import get_logger
from nativedeps.core.subprocess_runner import (
    DEFAULT_TIMEOUT,
    LIBRARY_PATH_SEPARATOR,
    build_library_env,
    run_tool,
)

LOGGER = get_logger(__name__)

NOT_FOUND_MARKER = "not found"
RESOLUTION_SEPARATOR = "=>"
LIBRARY_PATH_VAR = "LD_LIBRARY_PATH"
LDD_COMMAND = "ldd"


def parse_missing_dependencies(output: str, lowercase: bool = False) -> List[str]:
    """Extract unresolved dependency names from linker tool output.

    A line counts when, stripped of surrounding whitespace, it ends with
    "not found" and contains "=>". The name is the text before the first
    "=>".

    Args:
        output: Tool stdout.
        lowercase: Lower-case each name (Windows DLL names).
    """
    missing: List[str] = []
    for raw_line in output.split("\n"):
        line = raw_line.strip()
        if not line.endswith(NOT_FOUND_MARKER) or RESOLUTION_SEPARATOR not in line:
            continue
        name = line.split(RESOLUTION_SEPARATOR, 1)[0].strip()
        missing.append(name.lower() if lowercase else name)
    return missing


def _run_probe(
    cmd: List[str],
    file_path: Path,
    env: dict,
    timeout: int,
    lowercase: bool,
) -> List[str]:
    try:
        result = run_tool(cmd, cwd=file_path.parent, env=env, timeout=timeout)
    except subprocess.TimeoutExpired:
        LOGGER.warning(f"{cmd[0]} timed out after {timeout}s on {file_path}")
        return []
    except subprocess.SubprocessError as e:
        LOGGER.debug(f"Cannot probe {file_path}: {e}")
        return []

    if result.returncode != 0:
        LOGGER.debug(f"{cmd[0]} exited with {result.returncode} on {file_path}")
        return []

    missing = parse_missing_dependencies(result.stdout, lowercase=lowercase)
    if missing:
        LOGGER.debug(f"{file_path.name}: unresolved {', '.join(missing)}")
    return missing


class LinuxProber:
    """Probes ELF binaries with ldd.

    The library search path is the inherited LD_LIBRARY_PATH followed by
    the extra directories (usually the directories being validated).
    """

    def __init__(
        self,
        extra_library_paths: Sequence[Path] = (),
        timeout: int = DEFAULT_TIMEOUT,
        ldd: str = LDD_COMMAND,
    ) -> None:
        self._extra_library_paths = [str(p) for p in extra_library_paths]
        self._timeout = timeout
        self._ldd = ldd

    def probe(self, file_path: Path) -> List[str]:
        """Return the libraries ldd reports as not found (case preserved)."""
        env = build_library_env(
            LIBRARY_PATH_VAR,
            os.environ.get(LIBRARY_PATH_VAR),
            LIBRARY_PATH_SEPARATOR.join(self._extra_library_paths),
        )
        return _run_probe([self._ldd, str(file_path)], file_path, env, self._timeout, lowercase=False)


class WindowsProber:
    """Probes PE binaries with the bundled PrintDeps.exe.

    Runs in the binary's own directory with that directory appended to
    the search path. DLL names are lower-cased.
    """

    def __init__(
        self,
        print_deps_exe: Path,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self._print_deps_exe = print_deps_exe
        self._timeout = timeout

    def probe(self, file_path: Path) -> List[str]:
        env = build_library_env(
            LIBRARY_PATH_VAR,
            os.environ.get(LIBRARY_PATH_VAR),
            str(file_path.parent),
        )
        return _run_probe(
            [str(self._print_deps_exe), str(file_path)],
            file_path,
            env,
            self._timeout,
            lowercase=True,
        )
