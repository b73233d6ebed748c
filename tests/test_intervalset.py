from dataclasses import dataclass
from datetime import date

import pytest

from occupancy import Interval, IntervalSet, InvalidIntervalError


def test_accepts_intervals_pairs_and_triples() -> None:
    intervals = IntervalSet(
        [
            Interval(id="A", start=1901, end=1905),
            (1903, 1910),
            ("C", 1908, 1908),
        ]
    )

    assert len(intervals) == 3
    assert intervals[0] == Interval(id="A", start=1901, end=1905)
    assert intervals[1] == Interval(start=1903, end=1910)
    assert intervals[2] == Interval(id="C", start=1908, end=1908)


def test_keeps_insertion_order() -> None:
    intervals = IntervalSet([(5, 6), (1, 2), (3, 4)])

    assert [ivl.start for ivl in intervals] == [5, 1, 3]


def test_accepts_list_pairs_and_triples() -> None:
    intervals = IntervalSet([[1901, 1905], ["B", 1903, 1910]])

    assert list(intervals) == [
        Interval(start=1901, end=1905),
        Interval(id="B", start=1903, end=1910),
    ]


def test_accepts_duck_typed_records() -> None:
    @dataclass
    class Person:
        id: str
        start: int
        end: int

    intervals = IntervalSet([Person("Ada", 1815, 1852)])

    assert intervals[0] == Interval(id="Ada", start=1815, end=1852)


def test_empty_set_is_valid() -> None:
    intervals = IntervalSet()

    assert len(intervals) == 0
    assert intervals.span is None


def test_invalid_element_fails_construction() -> None:
    with pytest.raises(InvalidIntervalError):
        IntervalSet([(1901, 1905), (1910, 1900)])


@pytest.mark.parametrize("item", ["1901", (1, 2, 3, 4), 1901])
def test_malformed_element(item) -> None:
    with pytest.raises(TypeError):
        IntervalSet([item])


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate interval id"):
        IntervalSet([("A", 1, 2), ("A", 3, 4)])


def test_none_ids_may_repeat() -> None:
    intervals = IntervalSet([(1, 2), (1, 2)])

    assert len(intervals) == 2


def test_from_pairs_uses_positions_as_ids() -> None:
    intervals = IntervalSet.from_pairs([(1901, 1905), (1903, 1910)])

    assert [ivl.id for ivl in intervals] == [0, 1]


def test_span() -> None:
    intervals = IntervalSet([(1903, 1910), (1901, 1905), (1908, 1908)])

    assert intervals.span == (1901, 1910)


def test_slice_returns_intervalset() -> None:
    intervals = IntervalSet([(1, 2), (3, 4), (5, 6)])

    head = intervals[:2]

    assert isinstance(head, IntervalSet)
    assert head == IntervalSet([(1, 2), (3, 4)])


def test_coerce_returns_existing_set() -> None:
    intervals = IntervalSet([(1, 2)])

    assert IntervalSet.coerce(intervals) is intervals
    assert IntervalSet.coerce([(1, 2)]) == intervals


def test_union_concatenates() -> None:
    left = IntervalSet([("A", 1, 2)])
    right = IntervalSet([("B", 3, 4)])

    assert list(left | right) == [
        Interval(id="A", start=1, end=2),
        Interval(id="B", start=3, end=4),
    ]
    assert left.union([("C", 5, 6)])[-1].id == "C"


def test_union_rejects_shared_ids() -> None:
    left = IntervalSet([("A", 1, 2)])
    right = IntervalSet([("A", 3, 4)])

    with pytest.raises(ValueError, match="share ids"):
        left | right


class TestFromRecords:
    """Building sets from loader rows."""

    def test_date_fields(self):
        rows = [
            {"name": "Ada", "born": "1815-12-10", "died": "1852-11-27"},
            {"name": "Charles", "born": date(1791, 12, 26), "died": "1871"},
        ]

        intervals = IntervalSet.from_records(rows, id="name", start="born", end="died")

        assert list(intervals) == [
            Interval(id="Ada", start=1815, end=1852),
            Interval(id="Charles", start=1791, end=1871),
        ]

    def test_default_field_names(self):
        intervals = IntervalSet.from_records([{"id": 7, "start": 1, "end": "3"}])

        assert intervals[0] == Interval(id=7, start=1, end=3)

    def test_without_ids(self):
        intervals = IntervalSet.from_records(
            [{"start": 1, "end": 2}, {"start": 1, "end": 2}], id=None
        )

        assert [ivl.id for ivl in intervals] == [None, None]

    def test_missing_field(self):
        with pytest.raises(ValueError, match="missing field 'died'"):
            IntervalSet.from_records([{"born": 1901}], start="born", end="died")

    def test_reversed_record(self):
        with pytest.raises(InvalidIntervalError):
            IntervalSet.from_records([{"id": 1, "start": "1910", "end": "1900"}])
