"""Command line interface for nativedeps."""

from __future__ import annotations

from typing import Iterable, Optional

from nativedeps.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the ``nativedeps`` console script."""
    return CLIRunner().run(argv)


__all__ = ["main", "CLIRunner"]
