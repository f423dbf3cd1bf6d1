"""Earliest safe entry, longest allowed stay and day expiry, built on the incremental window scan."""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from app.schemas.compliance import ExpiringDay, SafeEntryResult
from app.schemas.trip import TripSnapshot
from app.services.presence import Interval, merge_intervals, presence_intervals
from app.services.schengen import SCHENGEN_DAY_LIMIT, WINDOW_SIZE_DAYS
from app.services.window import PresenceCursor, as_reference_date, can_safely_enter, days_remaining, scan_intervals


def earliest_safe_entry(
    trips: Iterable[TripSnapshot],
    today: date,
    compliance_start: date | None = None,
) -> date | None:
    """First day from today on which entering keeps the window within the cap.

    Returns today itself when entry is already possible, and None only when no day in
    the next 180 allows entry.
    """
    today = as_reference_date(today)
    intervals = presence_intervals(trips, compliance_start)
    for day, used in scan_intervals(intervals, today, today + timedelta(days=WINDOW_SIZE_DAYS)):
        if can_safely_enter(used):
            return day
    return None


def _stay_fits(
    intervals: Sequence[Interval],
    entry_date: date,
    length: int,
    compliance_start: date | None,
) -> bool:
    # Every window ending between entry_date and the last stay day + 179 holds part of the stay
    stay_end = entry_date + timedelta(days=length - 1)
    stay_start = entry_date if compliance_start is None else max(entry_date, compliance_start)
    spans = list(intervals)
    if stay_start <= stay_end:
        spans.append((stay_start, stay_end))
    series = scan_intervals(
        merge_intervals(spans), entry_date, stay_end + timedelta(days=WINDOW_SIZE_DAYS - 1)
    )
    return max(used for _, used in series) <= SCHENGEN_DAY_LIMIT


def max_stay_days(
    trips: Iterable[TripSnapshot],
    entry_date: date,
    compliance_start: date | None = None,
) -> int:
    """Longest stay starting on entry_date that never exceeds 90 days in any window.

    Recorded trips before and after the stay are both taken into account, and days
    already covered by a recorded trip are not counted twice. A stay that fits stays
    fitting when shortened, so the first length that breaches ends the search.
    """
    entry_date = as_reference_date(entry_date)
    intervals = presence_intervals(trips, compliance_start)
    longest = 0
    for length in range(1, SCHENGEN_DAY_LIMIT + 1):
        if not _stay_fits(intervals, entry_date, length, compliance_start):
            break
        longest = length
    return longest


def safe_entry_info(
    trips: Iterable[TripSnapshot],
    today: date,
    compliance_start: date | None = None,
) -> SafeEntryResult:
    today = as_reference_date(today)
    trips = list(trips)
    intervals = presence_intervals(trips, compliance_start)
    current = scan_intervals(intervals, today, today)[0][1]
    safe_date = earliest_safe_entry(trips, today, compliance_start)

    if safe_date is None:
        return SafeEntryResult(
            can_enter_today=False,
            earliest_safe_date=None,
            days_until_compliant=0,
            days_used_on_entry=current,
            max_stay_days=0,
        )
    if safe_date == today:
        return SafeEntryResult(
            can_enter_today=True,
            earliest_safe_date=None,
            days_until_compliant=0,
            days_used_on_entry=current,
            max_stay_days=max_stay_days(trips, today, compliance_start),
        )
    return SafeEntryResult(
        can_enter_today=False,
        earliest_safe_date=safe_date,
        days_until_compliant=(safe_date - today).days,
        days_used_on_entry=scan_intervals(intervals, safe_date, safe_date)[0][1],
        max_stay_days=max_stay_days(trips, safe_date, compliance_start),
    )


def project_expiring_days(
    trips: Iterable[TripSnapshot],
    from_date: date,
    days: int,
    compliance_start: date | None = None,
) -> list[ExpiringDay]:
    """Outlook for from_date and the following days: used days falling out of the window each day.

    Recorded future trips are included, so a day can gain presence while an old day expires.
    """
    from_date = as_reference_date(from_date)
    intervals = presence_intervals(trips, compliance_start)
    leaving = PresenceCursor(intervals)
    outlook: list[ExpiringDay] = []
    series = scan_intervals(intervals, from_date, from_date + timedelta(days=max(days, 0)))
    for offset, (day, used) in enumerate(series):
        expired = leaving.contains(day - timedelta(days=WINDOW_SIZE_DAYS))
        outlook.append(
            ExpiringDay(
                day=day,
                expiring_days=1 if offset and expired else 0,
                days_used=used,
                days_remaining=days_remaining(used),
            )
        )
    return outlook
