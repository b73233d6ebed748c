"""Ordering of occupancy counts.

A RankedResult lists every covered point by count, highest first. Points
that share a count are ordered by an explicit tie-break, ascending point by
default, so "the" peak of a map with several equal maxima is always the
earliest one.
"""

import bisect
from collections.abc import Iterator, Sequence
from itertools import islice
from typing import Literal, NamedTuple, overload, override

from occupancy.occupancy_map import OccupancyMap, Run
from occupancy.util import DEFAULT_TIE_BREAK

TieBreak = Literal["ascending", "descending"]


class Ranked(NamedTuple):
    point: int
    count: int


class RankedResult(Sequence[Ranked]):
    """Occupancy entries sorted by count descending, then by tie-break.

    Backed by the map's runs rather than one entry per point, so indexing
    is a binary search and iteration is lazy.
    """

    def __init__(
        self,
        runs: Sequence[Run],
        tie_break: TieBreak = DEFAULT_TIE_BREAK,  # type: ignore[assignment]
    ):
        self.tie_break: TieBreak = _check_tie_break(tie_break)
        if tie_break == "ascending":
            self._runs: tuple[Run, ...] = tuple(
                sorted(runs, key=lambda r: (-r.count, r.start))
            )
        else:
            self._runs = tuple(sorted(runs, key=lambda r: (-r.count, -r.start)))

        # _ends[i] = number of entries contributed by runs[0..i]
        self._ends: list[int] = []
        total = 0
        for run in self._runs:
            total += run.length
            self._ends.append(total)

    @property
    def top(self) -> Ranked | None:
        """Highest-count entry, or None when there is nothing to rank."""
        if not self._runs:
            return None
        return self._entry(self._runs[0], 0)

    def ties(self) -> list[Ranked]:
        """All entries that share the top count, in ranking order."""
        if not self._runs:
            return []
        best = self._runs[0].count
        tied = 0
        for run in self._runs:
            if run.count != best:
                break
            tied += run.length
        return list(islice(self, tied))

    @property
    def size(self) -> int:
        """Number of ranked points. Unlike len(), never limited to sys.maxsize."""
        return self._ends[-1] if self._ends else 0

    def head(self, k: int) -> list[Ranked]:
        return list(islice(self, k))

    def _entry(self, run: Run, offset: int) -> Ranked:
        if self.tie_break == "ascending":
            return Ranked(run.start + offset, run.count)
        return Ranked(run.end - offset, run.count)

    @overload
    def __getitem__(self, index: int) -> Ranked: ...

    @overload
    def __getitem__(self, index: slice) -> list[Ranked]: ...

    @override
    def __getitem__(self, index: int | slice) -> "Ranked | list[Ranked]":
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self.size))]
        size = self.size
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("RankedResult index out of range")
        position = bisect.bisect_right(self._ends, index)
        before = self._ends[position - 1] if position else 0
        return self._entry(self._runs[position], index - before)

    @override
    def __iter__(self) -> Iterator[Ranked]:
        for run in self._runs:
            for offset in range(run.length):
                yield self._entry(run, offset)

    @override
    def __len__(self) -> int:
        return self.size

    def __bool__(self) -> bool:
        return bool(self._runs)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence) or isinstance(other, str):
            return NotImplemented
        other_size = other.size if isinstance(other, RankedResult) else len(other)
        return self.size == other_size and list(self) == list(other)

    __hash__ = None  # type: ignore[assignment]

    @override
    def __repr__(self) -> str:
        preview = ", ".join(f"({p}, {c})" for p, c in self.head(5))
        more = ", ..." if self.size > 5 else ""
        return f"RankedResult([{preview}{more}])"


class RankingPolicy:
    """Orders an OccupancyMap by count descending with a fixed tie-break.

    Args:
        tie_break: "ascending" puts the smallest point first among equal
            counts, "descending" the largest
    """

    def __init__(self, tie_break: TieBreak = DEFAULT_TIE_BREAK):  # type: ignore[assignment]
        self.tie_break: TieBreak = _check_tie_break(tie_break)

    def rank(self, occupancy: OccupancyMap) -> RankedResult:
        return RankedResult(occupancy.runs(), self.tie_break)

    def __repr__(self) -> str:
        return f"RankingPolicy(tie_break={self.tie_break!r})"


def rank(occupancy: OccupancyMap) -> RankedResult:
    """Rank with the default policy (ascending tie-break)."""
    return RankingPolicy().rank(occupancy)


def _check_tie_break(tie_break: str) -> TieBreak:
    if tie_break not in ("ascending", "descending"):
        raise ValueError(
            f"Invalid tie_break {tie_break!r}. Valid: 'ascending', 'descending'"
        )
    return tie_break  # type: ignore[return-value]
