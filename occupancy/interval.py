from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Hashable, Literal

from dateutil import parser as date_parser


class InvalidIntervalError(ValueError):
    """Raised when an interval ends before it starts."""

    def __init__(self, start: int, end: int, id: Hashable | None = None):
        self.start: int = start
        self.end: int = end
        self.id: Hashable | None = id
        label = f" {id!r}" if id is not None else ""
        super().__init__(
            f"Interval{label} start ({start}) must be <= end ({end}).\n"
            f"Hint: Fix the record upstream; intervals are closed, so a "
            f"single-point span is written as start == end."
        )


@dataclass(frozen=True, kw_only=True)
class Interval:
    start: int
    end: int
    id: Hashable | None = None

    def __post_init__(self) -> None:
        _require_int(self.start, "start")
        _require_int(self.end, "end")
        if self.start > self.end:
            raise InvalidIntervalError(self.start, self.end, self.id)

    @property
    def length(self) -> int:
        """Number of points covered, counting both endpoints."""
        return self.end - self.start + 1

    def contains(self, point: int) -> bool:
        return self.start <= point <= self.end

    def __str__(self) -> str:
        """Human-friendly string showing range and length."""
        label = f"{self.id}: " if self.id is not None else ""
        return f"Interval({label}{self.start}→{self.end}, {self.length} points)"


def _require_int(value: Any, edge: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"Interval {edge} must be an int.\n"
            f"Got {type(value).__name__!r}: {value!r}\n"
            f"Hint: Convert raw values with coerce_point() or build intervals "
            f"through IntervalSet.from_records()."
        )


def coerce_point(value: Any, edge: Literal["start", "end"] = "start") -> int:
    """Convert a loader-supplied value to an integer point (a year).

    Accepts:
    - int: Passed through as-is
    - date / datetime: Reduced to its year
    - str: An integer literal ("1901", "-44") or any date string that
      dateutil can parse ("1901-03-04", "4 March 1901"), reduced to its year

    Raises:
        TypeError: If value is an unsupported type (floats included; the
            domain is integer-only)
        ValueError: If a string is neither an integer nor a parseable date
    """
    if isinstance(value, bool):
        raise TypeError(f"Interval {edge} must not be a bool, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, date):
        return value.year
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
        try:
            # Parse against two defaults: a string without a year would
            # otherwise silently take the current one
            first = date_parser.parse(text, default=datetime(1, 1, 1)).year
            second = date_parser.parse(text, default=datetime(2, 1, 1)).year
        except (ValueError, OverflowError) as exc:
            raise ValueError(
                f"Cannot read interval {edge} from {value!r}.\n"
                f"Expected an integer year or a date string such as '1901-03-04'."
            ) from exc
        if first != second:
            raise ValueError(
                f"Cannot read interval {edge} from {value!r}: it has no year.\n"
                f"Hint: Include the year, e.g. '4 March 1901'."
            )
        return first
    raise TypeError(
        f"Interval {edge} must be int, date, datetime, or str.\n"
        f"Got {type(value).__name__!r}: {value!r}\n"
        f"Examples:\n"
        f"  1901                    # int (a year)\n"
        f"  date(1901, 3, 4)        # date objects\n"
        f"  '1901-03-04'            # date strings"
    )
