"""Exception hierarchy for nativedeps.

Probe-tool and linker-cache failures are recovered locally and never
surface as exceptions; everything below is meant to reach the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nativedeps.core.models import ValidationOutcome


class NativeDepsError(Exception):
    """Base class for all nativedeps errors."""

    pass


class CandidateScanError(NativeDepsError):
    """A directory or one of its entries could not be inspected.

    Scanning is all-or-nothing: a partial candidate list would hide
    missing dependencies, so any listing or stat failure is fatal.
    """

    pass


class MissingDependenciesError(NativeDepsError):
    """The host is missing native libraries required by the binaries."""

    def __init__(self, outcome: "ValidationOutcome") -> None:
        super().__init__(outcome.message)
        self.outcome = outcome

    @property
    def missing(self):
        return self.outcome.missing


class InstallationError(NativeDepsError):
    """The platform package manager failed to install dependencies."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class CatalogError(NativeDepsError):
    """The native dependency catalog could not be loaded."""

    pass
