"""Subprocess helpers for external introspection and installer tools.

Every call receives its own environment mapping; the process-wide
``os.environ`` is never modified.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from nativedeps.core.logging import get_logger

LOGGER = get_logger(__name__)

# Default timeout for a single introspection tool run (seconds)
DEFAULT_TIMEOUT = 60

LIBRARY_PATH_SEPARATOR = ":"


def build_library_env(
    variable: str,
    leading: Optional[str],
    trailing: Optional[str],
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Return a copy of the environment with an augmented search path.

    The variable is set to ``leading:trailing``; when one side is empty the
    other is used alone.

    Args:
        variable: Name of the search path variable (e.g. LD_LIBRARY_PATH).
        leading: Value placed first, usually the inherited value.
        trailing: Value appended after it.
        base_env: Environment to copy (defaults to os.environ).

    Returns:
        New environment dictionary.
    """
    env = dict(os.environ if base_env is None else base_env)
    parts = [part for part in (leading, trailing) if part]
    env[variable] = LIBRARY_PATH_SEPARATOR.join(parts)
    return env


def run_tool(
    cmd: List[str],
    cwd: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run a tool and capture its textual output.

    Args:
        cmd: Command and arguments to run.
        cwd: Working directory for the command.
        env: Environment for the child process.
        timeout: Timeout in seconds.

    Returns:
        CompletedProcess with stdout/stderr captured as text.

    Raises:
        subprocess.TimeoutExpired: If the command times out.
        subprocess.SubprocessError: If the command fails to start.
    """
    LOGGER.debug(f"Running: {' '.join(cmd)}")
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            timeout=timeout,
        )
    except OSError as e:
        raise subprocess.SubprocessError(f"Failed to run {cmd[0]}: {e}") from e


def run_inherited(
    cmd: List[str],
    cwd: Union[str, Path, None] = None,
) -> int:
    """Run a command with inherited stdin/stdout/stderr.

    Returns:
        The process exit code.

    Raises:
        subprocess.SubprocessError: If the command fails to start.
    """
    LOGGER.debug(f"Spawning: {' '.join(cmd)}")
    try:
        completed = subprocess.run(cmd, cwd=str(cwd) if cwd is not None else None)
    except OSError as e:
        raise subprocess.SubprocessError(f"Failed to run {cmd[0]}: {e}") from e
    return completed.returncode
