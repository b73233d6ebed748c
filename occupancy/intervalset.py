from collections.abc import Hashable, Iterable, Iterator, Mapping, Sequence
from typing import Any, overload, override

from occupancy.interval import Interval, coerce_point


class IntervalSet(Sequence[Interval]):
    """Immutable, validated collection of intervals.

    Keeps insertion order. Every element is checked on construction, so a
    counter handed an IntervalSet never sees a malformed interval.

    Elements may be Interval objects, ``(start, end)`` pairs or
    ``(id, start, end)`` triples; lists work as well as tuples. Non-None ids must be unique.
    """

    def __init__(self, items: Iterable[Any] = ()):
        intervals = tuple(_to_interval(item) for item in items)

        seen: set[Hashable] = set()
        for interval in intervals:
            if interval.id is None:
                continue
            if interval.id in seen:
                raise ValueError(
                    f"Duplicate interval id {interval.id!r} in IntervalSet.\n"
                    f"Hint: ids identify entities; leave them as None if the "
                    f"source has no natural key."
                )
            seen.add(interval.id)

        self._intervals: tuple[Interval, ...] = intervals

    @classmethod
    def coerce(cls, value: "IntervalSet | Iterable[Any]") -> "IntervalSet":
        """Return value if it is already an IntervalSet, else validate it into one."""
        if isinstance(value, IntervalSet):
            return value
        return cls(value)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]]) -> "IntervalSet":
        """Build a set from ``(start, end)`` pairs, using each pair's position as its id."""
        return cls(
            Interval(id=index, start=start, end=end)
            for index, (start, end) in enumerate(pairs)
        )

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        id: str | None = "id",
        start: str = "start",
        end: str = "end",
    ) -> "IntervalSet":
        """Build a set from mapping records such as the rows of a CSV reader.

        Field values go through coerce_point, so years may arrive as ints,
        integer strings, dates or date strings.

        Example:
            >>> rows = [{"name": "Ada", "born": "1815-12-10", "died": "1852-11-27"}]
            >>> IntervalSet.from_records(rows, id="name", start="born", end="died")
        """
        intervals: list[Interval] = []
        for record in records:
            try:
                raw_start = record[start]
                raw_end = record[end]
            except KeyError as exc:
                raise ValueError(
                    f"Record is missing field {exc.args[0]!r}.\n"
                    f"Got fields: {sorted(record)}\n"
                    f"Hint: Pass start=/end= to name the columns holding the bounds."
                ) from exc
            intervals.append(
                Interval(
                    id=record.get(id) if id is not None else None,
                    start=coerce_point(raw_start, "start"),
                    end=coerce_point(raw_end, "end"),
                )
            )
        return cls(intervals)

    @property
    def span(self) -> tuple[int, int] | None:
        """Return (min start, max end), or None for an empty set."""
        if not self._intervals:
            return None
        return (
            min(interval.start for interval in self._intervals),
            max(interval.end for interval in self._intervals),
        )

    def union(self, other: "IntervalSet | Iterable[Any]") -> "IntervalSet":
        """Concatenate two sets whose id spaces are disjoint."""
        other = IntervalSet.coerce(other)
        mine = {interval.id for interval in self._intervals} - {None}
        theirs = {interval.id for interval in other} - {None}
        shared = mine & theirs
        if shared:
            raise ValueError(
                f"Cannot union IntervalSets that share ids: {sorted(map(repr, shared))}\n"
                f"Hint: Re-key one side so each entity appears once."
            )
        return IntervalSet((*self._intervals, *other))

    def __or__(self, other: "IntervalSet") -> "IntervalSet":
        return self.union(other)

    @override
    def __len__(self) -> int:
        return len(self._intervals)

    @overload
    def __getitem__(self, index: int) -> Interval: ...

    @overload
    def __getitem__(self, index: slice) -> "IntervalSet": ...

    @override
    def __getitem__(self, index: int | slice) -> "Interval | IntervalSet":
        if isinstance(index, slice):
            return IntervalSet(self._intervals[index])
        return self._intervals[index]

    @override
    def __iter__(self) -> Iterator[Interval]:
        return iter(self._intervals)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._intervals == other._intervals

    @override
    def __hash__(self) -> int:
        return hash(self._intervals)

    @override
    def __repr__(self) -> str:
        return f"IntervalSet({list(self._intervals)!r})"


def _to_interval(item: Any) -> Interval:
    if isinstance(item, Interval):
        return item
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes)):
        if len(item) == 2:
            return Interval(start=item[0], end=item[1])
        if len(item) == 3:
            return Interval(id=item[0], start=item[1], end=item[2])
    # Duck-typed records (ORM rows, other dataclasses) carrying start/end
    if hasattr(item, "start") and hasattr(item, "end"):
        return Interval(
            id=getattr(item, "id", None), start=item.start, end=item.end
        )
    raise TypeError(
        f"Cannot build an Interval from {type(item).__name__!r}: {item!r}\n"
        f"Expected an Interval, a [start, end] pair, or an [id, start, end] triple."
    )


__all__ = ["IntervalSet"]
