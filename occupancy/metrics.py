"""Aggregate helpers over interval collections.

Each helper counts with a SweepLineCounter unless another counter is
supplied, and treats empty input as a valid, quiet case.
"""

from collections.abc import Iterable
from typing import Any

from occupancy.counters import OccupancyCounter, SweepLineCounter
from occupancy.intervalset import IntervalSet
from occupancy.occupancy_map import OccupancyMap
from occupancy.ranking import Ranked, rank


def _occupancy(
    intervals: IntervalSet | Iterable[Any], counter: OccupancyCounter | None
) -> OccupancyMap:
    return (counter or SweepLineCounter()).count(intervals)


def peak(
    intervals: IntervalSet | Iterable[Any], counter: OccupancyCounter | None = None
) -> Ranked | None:
    """Return the most-occupied point (earliest on ties), or None when empty.

    Example:
        >>> peak([(1901, 1905), (1903, 1910), (1908, 1908)])
        Ranked(point=1903, count=2)
    """
    return rank(_occupancy(intervals, counter)).top


def peaks(
    intervals: IntervalSet | Iterable[Any], counter: OccupancyCounter | None = None
) -> list[Ranked]:
    """Return every point that reaches the maximum count, ascending."""
    return rank(_occupancy(intervals, counter)).ties()


def total_presence(intervals: IntervalSet | Iterable[Any]) -> int:
    """Sum of interval lengths, e.g. person-years lived."""
    return sum(interval.length for interval in IntervalSet.coerce(intervals))


def coverage_ratio(
    intervals: IntervalSet | Iterable[Any], counter: OccupancyCounter | None = None
) -> float:
    """Fraction of the span [min start, max end] covered by at least one interval."""
    occupancy = _occupancy(intervals, counter)
    span = occupancy.span
    if span is None:
        return 0.0
    return occupancy.size / (span[1] - span[0] + 1)


def mean_occupancy(
    intervals: IntervalSet | Iterable[Any], counter: OccupancyCounter | None = None
) -> float:
    """Average count over covered points."""
    occupancy = _occupancy(intervals, counter)
    if not occupancy:
        return 0.0
    return occupancy.total / occupancy.size
