import logging
from abc import ABC, abstractmethod
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar, override

from occupancy import util
from occupancy.interval import Interval
from occupancy.intervalset import IntervalSet
from occupancy.occupancy_map import OccupancyMap

logger = logging.getLogger(__name__)

Partial = TypeVar("Partial")

Domain = tuple[int, int] | range


class OccupancyCounter(ABC):
    """Turns a collection of intervals into an OccupancyMap.

    Subclasses only describe how one chunk of intervals is accumulated and
    how accumulated chunks become a map. Validation, domain handling and
    optional chunked parallelism live here so every counter fails the same
    way on the same input.
    """

    def __init__(self, workers: int = 1):
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ValueError(f"workers must be a positive int, got {workers!r}")
        self.workers: int = workers

    def count(
        self,
        intervals: IntervalSet | Iterable[Any],
        domain: Domain | None = None,
    ) -> OccupancyMap:
        """Count how many intervals cover each point.

        Args:
            intervals: An IntervalSet, or anything IntervalSet accepts
            domain: Optional bounded domain, either a (lo, hi) pair of
                inclusive bounds or a range with step 1; the result is
                clipped to it

        Raises:
            InvalidIntervalError: If any interval has start > end. Raised
                before any counting happens.
        """
        interval_set = IntervalSet.coerce(intervals)
        bounds = _coerce_domain(domain)
        if not interval_set:
            return OccupancyMap()

        occupancy = self._count(interval_set, bounds)
        logger.debug(
            "%s counted %d intervals into %d runs",
            type(self).__name__,
            len(interval_set),
            len(occupancy.runs()),
        )
        return occupancy

    @abstractmethod
    def _count(
        self, intervals: IntervalSet, bounds: tuple[int, int] | None
    ) -> OccupancyMap:
        pass

    def _map_chunks(
        self,
        accumulate: Callable[[Sequence[Interval]], Partial],
        intervals: IntervalSet,
    ) -> list[Partial]:
        """Apply accumulate to chunks of intervals, in parallel when worthwhile.

        Partial results are independent; callers merge them by key.
        """
        items = tuple(intervals)
        if self.workers == 1 or len(items) < util.PARALLEL_THRESHOLD:
            return [accumulate(items)]

        size = -(-len(items) // self.workers)
        chunks = [items[i : i + size] for i in range(0, len(items), size)]
        logger.debug(
            "%s splitting %d intervals into %d chunks",
            type(self).__name__,
            len(items),
            len(chunks),
        )
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(accumulate, chunks))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(workers={self.workers})"


class SweepLineCounter(OccupancyCounter):
    """Difference-array counter.

    Each interval [s, e] adds +1 at s and -1 at e + 1: an entity present at
    e has left by e + 1. Prefix-summing the sorted marker points gives the
    occupancy. Work and memory follow the number of distinct markers
    (at most 2n), never the interval lengths.
    """

    @override
    def _count(
        self, intervals: IntervalSet, bounds: tuple[int, int] | None
    ) -> OccupancyMap:
        partials = self._map_chunks(_accumulate_deltas, intervals)
        deltas = _merge_by_key(partials)
        logger.debug("SweepLineCounter walking %d marker points", len(deltas))

        lo, hi = bounds if bounds is not None else (None, None)
        return OccupancyMap.from_deltas(deltas, lo, hi)


class BruteForceCounter(OccupancyCounter):
    """Reference counter that visits every covered point of every interval.

    Cost grows with the summed interval lengths. Use it as an oracle for
    SweepLineCounter, not on long spans.
    """

    @override
    def _count(
        self, intervals: IntervalSet, bounds: tuple[int, int] | None
    ) -> OccupancyMap:
        def tally(chunk: Sequence[Interval]) -> Counter[int]:
            counts: Counter[int] = Counter()
            for interval in chunk:
                counts.update(_points(interval, bounds))
            return counts

        partials = self._map_chunks(tally, intervals)
        return OccupancyMap.from_counts(_merge_by_key(partials))


def _accumulate_deltas(intervals: Sequence[Interval]) -> dict[int, int]:
    deltas: defaultdict[int, int] = defaultdict(int)
    for interval in intervals:
        deltas[interval.start] += 1
        deltas[interval.end + 1] -= 1
    return deltas


def _points(interval: Interval, bounds: tuple[int, int] | None) -> range:
    """Covered points of one interval, lazily, clipped to bounds."""
    if bounds is None:
        return range(interval.start, interval.end + 1)
    lo, hi = bounds
    return range(max(interval.start, lo), min(interval.end, hi) + 1)


def _merge_by_key(partials: Sequence[dict[int, int]]) -> dict[int, int]:
    """Sum partial tables point by point."""
    if len(partials) == 1:
        return partials[0]
    merged: defaultdict[int, int] = defaultdict(int)
    for partial in partials:
        for point, value in partial.items():
            merged[point] += value
    return merged


def _coerce_domain(domain: Domain | None) -> tuple[int, int] | None:
    """Normalize a domain argument to inclusive (lo, hi) bounds."""
    if domain is None:
        return None
    if isinstance(domain, range):
        if domain.step != 1:
            raise ValueError(f"Domain range must have step 1, got {domain!r}")
        if not domain:
            raise ValueError(f"Domain range must not be empty, got {domain!r}")
        return domain.start, domain.stop - 1
    if isinstance(domain, tuple) and len(domain) == 2:
        lo, hi = domain
        for bound in (lo, hi):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise TypeError(f"Domain bounds must be ints, got {domain!r}")
        if lo > hi:
            raise ValueError(f"Domain lower bound {lo} must be <= upper bound {hi}")
        return lo, hi
    raise TypeError(
        f"Domain must be a (lo, hi) tuple or a range.\n"
        f"Got {type(domain).__name__!r}: {domain!r}\n"
        f"Examples:\n"
        f"  counter.count(intervals, domain=(1900, 1950))\n"
        f"  counter.count(intervals, domain=range(1900, 1951))"
    )
