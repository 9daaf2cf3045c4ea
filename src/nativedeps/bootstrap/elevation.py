"""Privilege elevation for package manager commands."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class ElevatedCommand:
    """A shell invocation that runs commands with root privileges.

    Attributes:
        command: Program to spawn (sh, sudo, or su).
        args: Its arguments.
        elevated: True when the user will be switched to root.
    """

    command: str
    args: List[str]
    elevated: bool


def is_root_user() -> bool:
    """Return True when running with an effective uid of 0."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def transform_commands_for_root(
    commands: Sequence[str],
    is_root: Optional[bool] = None,
    sudo_available: Optional[bool] = None,
) -> ElevatedCommand:
    """Wrap shell commands so they run as root.

    Already root: plain ``sh -c``. Otherwise ``sudo -- sh -c`` when sudo is
    on PATH, falling back to ``su root -c``.
    """
    script = "&& ".join(commands)
    if is_root is None:
        is_root = is_root_user()
    if is_root:
        return ElevatedCommand(command="sh", args=["-c", script], elevated=False)

    if sudo_available is None:
        sudo_available = shutil.which("sudo") is not None
    if sudo_available:
        return ElevatedCommand(command="sudo", args=["--", "sh", "-c", script], elevated=True)
    return ElevatedCommand(command="su", args=["root", "-c", script], elevated=True)
