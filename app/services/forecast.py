"""Forecast engine: would a planned trip push the employee over the 90-day cap?

The candidate is added to a copy of the trip set and the window is scanned over every
reference date from its exit day to 89 days later; the worst count decides the flags.
Stored trips are never touched.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from app.schemas.compliance import ForecastFilter, ForecastResult, ForecastSort, FutureTripForecast, SortOrder
from app.schemas.settings import RuleConfig
from app.schemas.trip import TripSnapshot
from app.services.presence import presence_intervals, validate_trip
from app.services.risk import classify
from app.services.schengen import SCHENGEN_DAY_LIMIT, WINDOW_SIZE_DAYS, is_schengen_country
from app.services.window import days_used_in_intervals, scan_intervals

FORECAST_HORIZON_DAYS = 89


def _without_candidate(existing_trips: Iterable[TripSnapshot], candidate: TripSnapshot) -> list[TripSnapshot]:
    # Forecasting a trip that is already stored must not count it twice
    return [t for t in existing_trips if candidate.id is None or t.id != candidate.id]


def worst_case(
    existing_trips: list[TripSnapshot],
    candidate: TripSnapshot,
    compliance_start: date | None = None,
) -> tuple[date, int]:
    """(reference_date, days_used) with the highest count over the forecast horizon."""
    intervals = presence_intervals([*existing_trips, candidate], compliance_start)
    horizon_end = candidate.exit_date + timedelta(days=FORECAST_HORIZON_DAYS)
    series = scan_intervals(intervals, candidate.exit_date, horizon_end)
    return max(series, key=lambda point: point[1])


def compliant_from_date(
    existing_trips: list[TripSnapshot],
    candidate: TripSnapshot,
    compliance_start: date | None = None,
) -> date | None:
    """Earliest later start at which a trip of the same length stays within the cap."""
    duration = candidate.exit_date - candidate.entry_date
    for shift in range(1, WINDOW_SIZE_DAYS + 1):
        entry = candidate.entry_date + timedelta(days=shift)
        shifted = candidate.model_copy(update={"entry_date": entry, "exit_date": entry + duration})
        _, worst = worst_case(existing_trips, shifted, compliance_start)
        if worst <= SCHENGEN_DAY_LIMIT:
            return entry
    return None


def forecast(
    existing_trips: Iterable[TripSnapshot],
    candidate: TripSnapshot,
    config: RuleConfig,
    compliance_start: date | None = None,
) -> ForecastResult:
    validate_trip(candidate)
    candidate = candidate.model_copy(update={"ghosted": False})
    existing = _without_candidate(existing_trips, candidate)

    before = days_used_in_intervals(
        presence_intervals(existing, compliance_start), candidate.entry_date - timedelta(days=1)
    )
    worst_date, worst = worst_case(existing, candidate, compliance_start)
    breach = worst > SCHENGEN_DAY_LIMIT
    schengen = is_schengen_country(candidate.country)

    return ForecastResult(
        worst_case_days_used=worst,
        breach_flag=breach,
        warning_flag=worst > config.forecast_warning_threshold,
        worst_case_date=worst_date,
        is_schengen=schengen,
        trip_duration=(candidate.exit_date - candidate.entry_date).days + 1,
        days_used_before_trip=before,
        days_remaining_after_trip=SCHENGEN_DAY_LIMIT - worst,
        risk_tier=classify(worst, config),
        compliant_from_date=compliant_from_date(existing, candidate, compliance_start) if breach and schengen else None,
    )


def forecast_future_trips(
    existing_trips: Iterable[TripSnapshot],
    today: date,
    config: RuleConfig,
    compliance_start: date | None = None,
) -> list[FutureTripForecast]:
    """Forecast every stored non-ghosted trip entering on or after today, each against the others."""
    trips = list(existing_trips)
    return [
        FutureTripForecast(
            employee_id=trip.employee_id,
            trip=trip,
            forecast=forecast(trips, trip, config, compliance_start),
        )
        for trip in sorted(trips, key=lambda t: (t.entry_date, t.id or 0))
        if not trip.ghosted and trip.entry_date >= today
    ]


def _risk_rank(item: FutureTripForecast) -> int:
    if item.forecast.breach_flag:
        return 0
    if item.forecast.warning_flag:
        return 1
    return 2


_SORT_KEYS = {
    ForecastSort.date: lambda i: (i.trip.entry_date, i.employee_id or 0),
    ForecastSort.employee: lambda i: ((i.employee_name or "").lower(), i.trip.entry_date),
    ForecastSort.risk: lambda i: (_risk_rank(i), -i.forecast.worst_case_days_used, i.trip.entry_date),
}


def sort_forecasts(
    items: Iterable[FutureTripForecast],
    field: ForecastSort = ForecastSort.date,
    order: SortOrder = SortOrder.asc,
) -> list[FutureTripForecast]:
    """Most urgent first when sorting by risk ascending; entry date breaks ties."""
    return sorted(items, key=_SORT_KEYS[field], reverse=order == SortOrder.desc)


def filter_forecasts(
    items: Iterable[FutureTripForecast],
    risk: ForecastFilter = ForecastFilter.all,
) -> list[FutureTripForecast]:
    if risk == ForecastFilter.critical:
        return [i for i in items if i.forecast.breach_flag]
    if risk == ForecastFilter.at_risk:
        return [i for i in items if i.forecast.breach_flag or i.forecast.warning_flag]
    return list(items)
