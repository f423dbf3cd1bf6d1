"""Interval validator: rejects a candidate trip that shares a day with an existing one.

Intervals are inclusive, so a trip exiting on the day another enters is a conflict;
one calendar day cannot belong to two trip records. The validator only reports. The
caller must reject the write, and must hold the per-employee write lock while checking.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date

from app.schemas.compliance import OverlapResult
from app.schemas.trip import BulkOverlapItem, DateInterval, TripSnapshot
from app.services.errors import InvalidDateRangeError, InvalidTripError, TripOverlapError


def validate_interval(entry_date: date, exit_date: date) -> None:
    if entry_date is None:
        raise InvalidTripError("entry_date", entry_date, "Entry date is required")
    if exit_date is None:
        raise InvalidTripError("exit_date", exit_date, "Exit date is required")
    if exit_date < entry_date:
        raise InvalidDateRangeError(entry_date, exit_date)


def intervals_overlap(a_entry: date, a_exit: date, b_entry: date, b_exit: date) -> bool:
    return a_entry <= b_exit and b_entry <= a_exit


def _comparable_trips(
    employee_id: int | None,
    existing_trips: Iterable[TripSnapshot],
    exclude_trip_id: int | None,
) -> Iterator[TripSnapshot]:
    for trip in existing_trips:
        if trip.ghosted:
            continue
        if exclude_trip_id is not None and trip.id == exclude_trip_id:
            continue
        if employee_id is not None and trip.employee_id is not None and trip.employee_id != employee_id:
            continue
        yield trip


def _overlap_message(trip: TripSnapshot) -> str:
    return (
        f"This trip overlaps with an existing trip ({trip.entry_date.isoformat()} - "
        f"{trip.exit_date.isoformat()}). Please adjust the dates."
    )


def check_overlap(
    employee_id: int | None,
    candidate: DateInterval,
    existing_trips: Iterable[TripSnapshot],
    exclude_trip_id: int | None = None,
) -> OverlapResult:
    """Return the earliest non-ghosted trip sharing a day with candidate, if any."""
    validate_interval(candidate.entry_date, candidate.exit_date)
    conflicts = [
        trip
        for trip in _comparable_trips(employee_id, existing_trips, exclude_trip_id)
        if intervals_overlap(candidate.entry_date, candidate.exit_date, trip.entry_date, trip.exit_date)
    ]
    if not conflicts:
        return OverlapResult(has_overlap=False)
    conflict = min(conflicts, key=lambda t: (t.entry_date, t.id or 0))
    return OverlapResult(has_overlap=True, conflicting_trip=conflict, message=_overlap_message(conflict))


def ensure_no_overlap(
    employee_id: int | None,
    candidate: DateInterval,
    existing_trips: Iterable[TripSnapshot],
    exclude_trip_id: int | None = None,
) -> None:
    result = check_overlap(employee_id, candidate, existing_trips, exclude_trip_id)
    if result.has_overlap:
        raise TripOverlapError(result.conflicting_trip, result.message)


def check_bulk_overlaps(
    employee_id: int | None,
    candidates: list[DateInterval],
    existing_trips: Iterable[TripSnapshot],
) -> list[BulkOverlapItem]:
    """Check a batch in order. Accepted candidates join the comparison set for later ones."""
    accepted = list(_comparable_trips(employee_id, existing_trips, None))
    results: list[BulkOverlapItem] = []
    for index, candidate in enumerate(candidates):
        result = check_overlap(employee_id, candidate, accepted)
        if result.has_overlap:
            results.append(BulkOverlapItem(index=index, has_overlap=True, message=f"Trip {index + 1}: {result.message}"))
            continue
        results.append(BulkOverlapItem(index=index, has_overlap=False))
        accepted.append(
            TripSnapshot(
                employee_id=employee_id,
                country="",
                entry_date=candidate.entry_date,
                exit_date=candidate.exit_date,
            )
        )
    return results
