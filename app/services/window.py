"""Window evaluator: days of presence inside the trailing 180-day window.

Single reference dates use closed-form interval overlap, O(trips). Date ranges use an
incremental sliding scan, O(trips + days). Never enumerate 180 days per reference date.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from app.schemas.trip import TripSnapshot
from app.services.errors import InvalidReferenceDateError
from app.services.presence import ONE_DAY, Interval, presence_intervals
from app.services.schengen import SCHENGEN_DAY_LIMIT, WINDOW_SIZE_DAYS


def as_reference_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise InvalidReferenceDateError(value, "Reference date must be a calendar date")
    return value


def window_bounds(reference_date: date) -> Interval:
    """[reference_date - 179, reference_date], both inclusive."""
    reference_date = as_reference_date(reference_date)
    return reference_date - timedelta(days=WINDOW_SIZE_DAYS - 1), reference_date


def overlap_length(start: date, end: date, window_start: date, window_end: date) -> int:
    return max(0, (min(end, window_end) - max(start, window_start)).days + 1)


def days_used_in_intervals(intervals: Iterable[Interval], reference_date: date) -> int:
    window_start, window_end = window_bounds(reference_date)
    return sum(overlap_length(start, end, window_start, window_end) for start, end in intervals)


def days_used(
    trips: Iterable[TripSnapshot],
    reference_date: date,
    compliance_start: date | None = None,
) -> int:
    """Presence days in the window ending on reference_date, in [0, 180]."""
    reference_date = as_reference_date(reference_date)
    return days_used_in_intervals(presence_intervals(trips, compliance_start), reference_date)


class PresenceCursor:
    """Membership test over sorted disjoint intervals for non-decreasing days."""

    def __init__(self, intervals: Sequence[Interval]):
        self._intervals = intervals
        self._index = 0

    def contains(self, day: date) -> bool:
        intervals = self._intervals
        while self._index < len(intervals) and intervals[self._index][1] < day:
            self._index += 1
        return self._index < len(intervals) and intervals[self._index][0] <= day


def scan_intervals(intervals: Sequence[Interval], start: date, end: date) -> list[tuple[date, int]]:
    """(reference_date, days_used) for every day in [start, end].

    The first point is closed-form; each later step adds the day entering the window
    and subtracts the day leaving it.
    """
    start = as_reference_date(start)
    end = as_reference_date(end)
    if end < start:
        raise InvalidReferenceDateError(end, f"range end {end.isoformat()} is before range start {start.isoformat()}")

    running = days_used_in_intervals(intervals, start)
    series = [(start, running)]
    entering = PresenceCursor(intervals)
    leaving = PresenceCursor(intervals)
    entering.contains(start)
    leaving.contains(start - timedelta(days=WINDOW_SIZE_DAYS))

    day = start
    while day < end:
        day += ONE_DAY
        if entering.contains(day):
            running += 1
        if leaving.contains(day - timedelta(days=WINDOW_SIZE_DAYS)):
            running -= 1
        series.append((day, running))
    return series


def days_used_series(
    trips: Iterable[TripSnapshot],
    start: date,
    end: date,
    compliance_start: date | None = None,
) -> list[tuple[date, int]]:
    return scan_intervals(presence_intervals(trips, compliance_start), start, end)


def days_remaining(used: int) -> int:
    return SCHENGEN_DAY_LIMIT - used


def is_compliant(used: int) -> bool:
    return used <= SCHENGEN_DAY_LIMIT


def can_safely_enter(used: int) -> bool:
    """Entering adds the entry day itself, so at most 89 days may already be used."""
    return used <= SCHENGEN_DAY_LIMIT - 1
