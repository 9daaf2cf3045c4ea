"""Concurrent probing and aggregation of missing dependencies."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Sequence, Set

from nativedeps.core.logging import get_logger
from nativedeps.validation.dlopen import DlopenCheckResult

LOGGER = get_logger(__name__)

# Probes are I/O bound (one subprocess each), so a few per core.
DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) * 4)

ProbeFn = Callable[[Path], Iterable[str]]


class DependencyAggregator:
    """Runs a probe over many binaries and unions the results.

    The union happens in the calling thread after every probe has
    finished, so no lock is needed and the result does not depend on
    completion order.
    """

    def __init__(
        self,
        probe: ProbeFn,
        max_workers: int = DEFAULT_MAX_WORKERS,
        sequential: bool = False,
    ) -> None:
        """Initialize the aggregator.

        Args:
            probe: Callable returning unresolved dependency names for a path.
            max_workers: Maximum number of concurrent probes.
            sequential: If True, probe one file at a time (for debugging).
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._probe = probe
        self._max_workers = max_workers
        self._sequential = sequential

    def aggregate(self, candidates: Sequence[Path]) -> Set[str]:
        """Probe every candidate and return the deduplicated union.

        Raises:
            Exception: Whatever an individual probe raises unexpectedly;
                no partial result is returned.
        """
        if not candidates:
            return set()

        LOGGER.info(f"Probing {len(candidates)} binaries...")
        if self._sequential:
            results = [list(self._probe(path)) for path in candidates]
        else:
            results = self._probe_parallel(candidates)

        missing: Set[str] = set()
        for deps in results:
            missing.update(deps)
        return missing

    def _probe_parallel(self, candidates: Sequence[Path]) -> List[List[str]]:
        workers = min(self._max_workers, len(candidates))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._probe, path) for path in candidates]
            # A failing probe re-raises here; the pool still waits for the rest on exit
            return [list(future.result()) for future in futures]

    @staticmethod
    def merge_dlopen(missing: Set[str], result: DlopenCheckResult) -> Set[str]:
        """Fold a linker cache check into an aggregated set.

        Libraries missing from the cache are added; libraries confirmed
        present are removed even if a probe reported them.
        """
        merged = set(missing)
        merged.update(result.missing)
        merged.difference_update(result.present)
        return merged
