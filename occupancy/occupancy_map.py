import bisect
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, overload, override

from occupancy.interval import coerce_point


@dataclass(frozen=True, kw_only=True)
class Run:
    """Consecutive points [start, end] that all share one non-zero count."""

    start: int
    end: int
    count: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


class OccupancyMap(Mapping[int, int]):
    """Read-only mapping from point to the number of intervals covering it.

    Only covered points are present; ``count_at`` reports 0 for the rest.
    Storage is a canonical tuple of maximal runs, so a map built from n
    intervals holds at most 2n - 1 runs regardless of how wide they are.

    Slicing restricts the map to a closed point range:

        >>> occupancy[1900:1950]   # points 1900..1950 inclusive
        >>> occupancy[:1900]       # everything up to and including 1900
    """

    def __init__(self, runs: Iterable[Run] = ()):
        self._runs: tuple[Run, ...] = _normalize(runs)
        self._starts: list[int] = [run.start for run in self._runs]
        self._size: int = sum(run.length for run in self._runs)

    @classmethod
    def from_deltas(
        cls,
        deltas: Mapping[int, int],
        lo: int | None = None,
        hi: int | None = None,
    ) -> "OccupancyMap":
        """Prefix-sum a difference table into an occupancy map.

        ``deltas[p]`` is the net change in occupancy at point p. The running
        total after adding a key's delta holds until the next key. Keys left
        of ``lo`` still feed the running total; runs are clipped to
        ``[lo, hi]``.

        Raises:
            ValueError: If the running total goes negative or does not
                return to zero after the last key
        """
        keys = sorted(deltas)
        runs: list[Run] = []
        running = 0

        for index, key in enumerate(keys):
            if hi is not None and key > hi:
                break
            running += deltas[key]
            if running < 0:
                raise ValueError(
                    f"Difference table drops below zero at point {key} ({running})."
                )
            if running == 0:
                continue
            if index + 1 == len(keys):
                raise ValueError(
                    f"Difference table leaves {running} open at point {key}.\n"
                    f"Hint: every +n at a start needs a matching -n after the end."
                )

            run_start = key if lo is None else max(key, lo)
            run_end = keys[index + 1] - 1 if hi is None else min(keys[index + 1] - 1, hi)
            if run_start > run_end:
                continue

            # Coalesce with previous run when counts match (a 0 delta key)
            if runs and runs[-1].end + 1 == run_start and runs[-1].count == running:
                runs[-1] = Run(start=runs[-1].start, end=run_end, count=running)
            else:
                runs.append(Run(start=run_start, end=run_end, count=running))

        return cls(runs)

    @classmethod
    def from_counts(cls, counts: Mapping[int, int]) -> "OccupancyMap":
        """Build a map from explicit per-point counts. Zero counts are dropped."""
        runs: list[Run] = []
        for point in sorted(counts):
            count = counts[point]
            if count < 0:
                raise ValueError(f"Count for point {point} must be >= 0, got {count}")
            if count == 0:
                continue
            if runs and runs[-1].end + 1 == point and runs[-1].count == count:
                runs[-1] = Run(start=runs[-1].start, end=point, count=count)
            else:
                runs.append(Run(start=point, end=point, count=count))
        return cls(runs)

    def runs(self) -> tuple[Run, ...]:
        return self._runs

    @property
    def span(self) -> tuple[int, int] | None:
        """First and last covered point, or None when nothing is covered."""
        if not self._runs:
            return None
        return self._runs[0].start, self._runs[-1].end

    @property
    def total(self) -> int:
        """Sum of counts over all points (equals the summed interval lengths)."""
        return sum(run.count * run.length for run in self._runs)

    @property
    def size(self) -> int:
        """Number of covered points. Unlike len(), never limited to sys.maxsize."""
        return self._size

    def count_at(self, point: int) -> int:
        return self.get(point, 0)

    def restrict(self, start: Any = None, end: Any = None) -> "OccupancyMap":
        """Return the part of this map inside the closed range [start, end]."""
        lo = None if start is None else coerce_point(start, "start")
        hi = None if end is None else coerce_point(end, "end")
        clipped: list[Run] = []
        for run in self._runs:
            if hi is not None and run.start > hi:
                break
            if lo is not None and run.end < lo:
                continue
            clipped.append(
                Run(
                    start=run.start if lo is None else max(run.start, lo),
                    end=run.end if hi is None else min(run.end, hi),
                    count=run.count,
                )
            )
        return OccupancyMap(clipped)

    @overload
    def __getitem__(self, key: int) -> int: ...

    @overload
    def __getitem__(self, key: slice) -> "OccupancyMap": ...

    @override
    def __getitem__(self, key: int | slice) -> "int | OccupancyMap":
        if isinstance(key, slice):
            if key.step is not None:
                raise TypeError("OccupancyMap slices do not support a step")
            return self.restrict(key.start, key.stop)
        if isinstance(key, bool) or not isinstance(key, int):
            raise KeyError(key)
        index = bisect.bisect_right(self._starts, key) - 1
        if index >= 0 and key <= self._runs[index].end:
            return self._runs[index].count
        raise KeyError(key)

    @override
    def __iter__(self) -> Iterator[int]:
        for run in self._runs:
            yield from range(run.start, run.end + 1)

    @override
    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return bool(self._runs)

    def __add__(self, other: "OccupancyMap") -> "OccupancyMap":
        """Pointwise sum, aligned on point value."""
        if not isinstance(other, OccupancyMap):
            return NotImplemented
        deltas: defaultdict[int, int] = defaultdict(int)
        for run in (*self._runs, *other._runs):
            deltas[run.start] += run.count
            deltas[run.end + 1] -= run.count
        return OccupancyMap.from_deltas(deltas)

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, OccupancyMap):
            return self._runs == other._runs
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        body = ", ".join(f"{r.start}..{r.end}: {r.count}" for r in self._runs)
        return f"OccupancyMap({{{body}}})"


def _normalize(runs: Iterable[Run]) -> tuple[Run, ...]:
    """Sort runs, reject overlaps and merge touching runs with equal counts."""
    merged: list[Run] = []
    for run in sorted(runs, key=lambda r: r.start):
        if run.start > run.end:
            raise ValueError(f"Run start ({run.start}) must be <= end ({run.end})")
        if run.count <= 0:
            raise ValueError(f"Run count must be positive, got {run.count}")
        if merged and run.start <= merged[-1].end:
            raise ValueError(
                f"Runs overlap: {merged[-1]} and {run}\n"
                f"Hint: add OccupancyMaps with + instead of concatenating runs."
            )
        if merged and merged[-1].end + 1 == run.start and merged[-1].count == run.count:
            merged[-1] = Run(start=merged[-1].start, end=run.end, count=run.count)
        else:
            merged.append(run)
    return tuple(merged)
