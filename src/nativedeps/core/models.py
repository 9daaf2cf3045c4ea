from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple


class DependencyGroup(str, Enum):
    """Catalog subsets, one per browser engine plus auxiliary tools."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"
    TOOLS = "tools"

    @classmethod
    def parse(cls, name: str) -> "DependencyGroup":
        """Parse a group name (case-insensitive).

        Raises:
            ValueError: If the name is not a known group.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(group.value for group in cls)
            raise ValueError(f"Unknown dependency group: {name}. Valid groups: {valid}") from None


class OutcomeKind(str, Enum):
    """Terminal result of classifying a missing dependency set."""

    SATISFIED = "satisfied"
    WARNED_UNSUPPORTED_PLATFORM = "warned_unsupported_platform"
    FATAL_MISSING_DEPENDENCIES = "fatal_missing_dependencies"


@dataclass(frozen=True)
class ValidationOutcome:
    """Decision produced by a classifier for one validation call.

    Attributes:
        kind: Satisfied, warned, or fatal.
        messages: Human-readable remediation blocks, in display order.
        missing: The aggregated missing library names the decision is based on.
    """

    kind: OutcomeKind
    messages: Tuple[str, ...] = ()
    missing: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def satisfied(cls) -> "ValidationOutcome":
        return cls(kind=OutcomeKind.SATISFIED)

    @property
    def message(self) -> str:
        return "".join(self.messages)

    @property
    def is_fatal(self) -> bool:
        return self.kind == OutcomeKind.FATAL_MISSING_DEPENDENCIES


@dataclass(frozen=True)
class InstallationRequest:
    """A single request to install the dependencies of some groups."""

    groups: FrozenSet[DependencyGroup]
    dry_run: bool = False
