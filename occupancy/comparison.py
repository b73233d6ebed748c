"""Side-by-side runs of several counters on the same input.

The brute-force counter exists to check the sweep line; ``compare`` runs
both, times them and reports whether their maps agree.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from occupancy.counters import BruteForceCounter, OccupancyCounter, SweepLineCounter
from occupancy.intervalset import IntervalSet
from occupancy.occupancy_map import OccupancyMap

logger = logging.getLogger(__name__)


class DivergenceError(RuntimeError):
    """Raised when counters disagree on the same input."""


@dataclass(frozen=True)
class Comparison:
    """Outcome of running several counters on one interval set.

    Attributes:
        results: Counter name -> the map it produced
        timings: Counter name -> best wall time in seconds
    """

    results: dict[str, OccupancyMap]
    timings: dict[str, float]

    @property
    def equivalent(self) -> bool:
        maps = list(self.results.values())
        return all(m == maps[0] for m in maps[1:])

    @property
    def fastest(self) -> str:
        return min(self.timings, key=self.timings.__getitem__)

    def check(self) -> "Comparison":
        """Return self if all counters agree, else raise DivergenceError."""
        names = list(self.results)
        reference = self.results[names[0]]
        for name in names[1:]:
            other = self.results[name]
            if other == reference:
                continue
            point = _first_difference(reference, other)
            raise DivergenceError(
                f"{names[0]} and {name} disagree at point {point}: "
                f"{reference.count_at(point)} != {other.count_at(point)}"
            )
        return self


def compare(
    intervals: IntervalSet | Iterable[Any],
    counters: Sequence[OccupancyCounter] | None = None,
    *,
    repeat: int = 1,
) -> Comparison:
    """Run each counter on the same validated input and collect the results.

    Args:
        intervals: Input intervals, validated once up front
        counters: Counters to run; defaults to sweep line and brute force
        repeat: Runs per counter; the fastest run is reported
    """
    if repeat < 1:
        raise ValueError(f"repeat must be >= 1, got {repeat}")
    interval_set = IntervalSet.coerce(intervals)
    if counters is None:
        counters = (SweepLineCounter(), BruteForceCounter())
    if not counters:
        raise ValueError(
            f"compare() requires at least one counter.\n"
            f"Example: compare(intervals, [SweepLineCounter(), BruteForceCounter()])"
        )

    results: dict[str, OccupancyMap] = {}
    timings: dict[str, float] = {}
    for counter in counters:
        name = type(counter).__name__
        if name in results:
            name = f"{name}#{len(results)}"
        best = float("inf")
        for _ in range(repeat):
            began = perf_counter()
            occupancy = counter.count(interval_set)
            best = min(best, perf_counter() - began)
        results[name] = occupancy
        timings[name] = best
        logger.debug("%s took %.6fs on %d intervals", name, best, len(interval_set))

    comparison = Comparison(results=results, timings=timings)
    if not comparison.equivalent:
        logger.warning("Counters disagree on %d intervals: %s", len(interval_set), list(results))
    return comparison


def _first_difference(a: OccupancyMap, b: OccupancyMap) -> int:
    for point in sorted(set(a) | set(b)):
        if a.count_at(point) != b.count_at(point):
            return point
    raise ValueError("maps are equal")
