"""Day-presence model: the canonical set of days an employee was in the Schengen area."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from app.schemas.trip import TripSnapshot
from app.services.errors import InvalidTripError
from app.services.schengen import is_schengen_country
from app.services.trip_overlap import validate_interval

Interval = tuple[date, date]

ONE_DAY = timedelta(days=1)


def validate_trip(trip: TripSnapshot) -> None:
    validate_interval(trip.entry_date, trip.exit_date)
    if not (trip.country or "").strip():
        raise InvalidTripError("country", trip.country, "Country code is required")


def counted_trips(trips: Iterable[TripSnapshot]) -> Iterator[TripSnapshot]:
    """Validated, non-ghosted trips to Schengen countries. Every input trip is validated."""
    for trip in trips:
        validate_trip(trip)
        if trip.ghosted or not is_schengen_country(trip.country):
            continue
        yield trip


def presence_intervals(trips: Iterable[TripSnapshot], compliance_start: date | None = None) -> list[Interval]:
    """Sorted, disjoint, inclusive intervals. Adjacent or overlapping trips are merged."""
    spans: list[Interval] = []
    for trip in counted_trips(trips):
        start = trip.entry_date if compliance_start is None else max(trip.entry_date, compliance_start)
        if start > trip.exit_date:
            continue
        spans.append((start, trip.exit_date))
    return merge_intervals(spans)


def merge_intervals(spans: Iterable[Interval]) -> list[Interval]:
    """Sort and join overlapping or adjacent inclusive intervals."""
    merged: list[Interval] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1] + ONE_DAY:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def interval_days(intervals: Iterable[Interval]) -> Iterator[date]:
    for start, end in intervals:
        day = start
        while day <= end:
            yield day
            day += ONE_DAY


def presence_days(trips: Iterable[TripSnapshot], compliance_start: date | None = None) -> list[date]:
    """Ordered, deduplicated presence dates, for calendar rendering."""
    return list(interval_days(presence_intervals(trips, compliance_start)))


def total_presence_days(trips: Iterable[TripSnapshot], compliance_start: date | None = None) -> int:
    return sum((end - start).days + 1 for start, end in presence_intervals(trips, compliance_start))


def presence_bounds(trips: Iterable[TripSnapshot], compliance_start: date | None = None) -> Interval | None:
    intervals = presence_intervals(trips, compliance_start)
    if not intervals:
        return None
    return intervals[0][0], intervals[-1][1]
