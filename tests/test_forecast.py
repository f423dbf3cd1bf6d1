"""Tests for the planned-trip forecast."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.schemas.compliance import ForecastFilter, ForecastResult, ForecastSort, RiskTier, SortOrder
from app.schemas.settings import RuleConfig
from app.services.errors import InvalidDateRangeError
from app.services.forecast import filter_forecasts, forecast, forecast_future_trips, sort_forecasts
from tests.factories import d, make_trip

EXISTING = [make_trip("2024-03-14", "2024-06-01", id=1)]


def test_trip_pushing_over_the_cap_is_a_breach():
    candidate = make_trip("2024-06-10", "2024-06-20")
    result = forecast(EXISTING, candidate, RuleConfig(forecast_warning_threshold=85))
    assert result.worst_case_days_used == 91
    assert result.worst_case_date == d("2024-06-20")
    assert result.breach_flag is True
    assert result.warning_flag is True
    assert result.days_used_before_trip == 80
    assert result.trip_duration == 11
    assert result.days_remaining_after_trip == -1
    assert result.risk_tier == RiskTier.breach
    assert result.compliant_from_date is not None
    assert result.compliant_from_date > candidate.entry_date


def test_compliant_from_date_is_actually_compliant():
    candidate = make_trip("2024-06-10", "2024-06-20")
    result = forecast(EXISTING, candidate, RuleConfig())
    shifted = make_trip(
        result.compliant_from_date.isoformat(),
        (result.compliant_from_date + (candidate.exit_date - candidate.entry_date)).isoformat(),
    )
    assert forecast(EXISTING, shifted, RuleConfig()).breach_flag is False


def test_short_trip_only_warns():
    candidate = make_trip("2024-06-10", "2024-06-14")
    result = forecast(EXISTING, candidate, RuleConfig(forecast_warning_threshold=80))
    assert result.worst_case_days_used == 85
    assert result.breach_flag is False
    assert result.warning_flag is True
    assert result.compliant_from_date is None


def test_trip_with_room_has_no_flags():
    result = forecast([], make_trip("2024-06-10", "2024-06-20"), RuleConfig())
    assert result.worst_case_days_used == 11
    assert result.breach_flag is False
    assert result.warning_flag is False
    assert result.risk_tier == RiskTier.safe


def test_non_schengen_trip_adds_nothing():
    result = forecast(EXISTING, make_trip("2024-06-10", "2024-06-20", country="GB"), RuleConfig())
    assert result.is_schengen is False
    assert result.worst_case_days_used == 80
    assert result.breach_flag is False


def test_stored_trip_is_not_counted_twice():
    candidate = make_trip("2024-03-14", "2024-06-01", id=1)
    result = forecast(EXISTING, candidate, RuleConfig())
    assert result.worst_case_days_used == 80
    assert result.days_used_before_trip == 0


def test_ghosted_candidate_is_still_forecast():
    result = forecast([], make_trip("2024-06-10", "2024-06-20", ghosted=True), RuleConfig())
    assert result.worst_case_days_used == 11


def test_existing_trips_are_not_modified():
    before = list(EXISTING)
    forecast(EXISTING, make_trip("2024-06-10", "2024-06-20"), RuleConfig())
    assert EXISTING == before


def test_invalid_candidate_is_rejected():
    with pytest.raises(InvalidDateRangeError):
        forecast(EXISTING, make_trip("2024-06-20", "2024-06-10"), RuleConfig())


def test_worst_case_date_is_required():
    with pytest.raises(ValidationError):
        ForecastResult(
            worst_case_days_used=10,
            breach_flag=False,
            warning_flag=False,
            trip_duration=10,
            days_used_before_trip=0,
            days_remaining_after_trip=80,
            risk_tier=RiskTier.safe,
        )


STORED = [
    make_trip("2024-03-14", "2024-06-01", id=1),
    make_trip("2024-06-10", "2024-06-20", id=2),
    make_trip("2024-07-01", "2024-07-02", id=3, ghosted=True),
    make_trip("2024-12-01", "2024-12-05", id=4),
]


def test_future_trips_are_forecast_against_the_others():
    items = forecast_future_trips(STORED, d("2024-06-05"), RuleConfig())
    assert [i.trip.id for i in items] == [2, 4]
    june, december = items
    assert june.forecast.worst_case_days_used == 91
    assert june.forecast.breach_flag is True
    assert december.forecast.worst_case_days_used == 16
    assert december.forecast.breach_flag is False
    assert december.forecast.warning_flag is False


def test_trip_entering_today_is_included():
    items = forecast_future_trips(STORED, d("2024-06-10"), RuleConfig())
    assert [i.trip.id for i in items] == [2, 4]
    assert forecast_future_trips(STORED, d("2024-06-11"), RuleConfig())[0].trip.id == 4


def test_sort_and_filter_future_forecasts():
    items = forecast_future_trips(STORED, d("2024-06-05"), RuleConfig())
    assert [i.trip.id for i in sort_forecasts(items, ForecastSort.date, SortOrder.desc)] == [4, 2]
    assert [i.trip.id for i in sort_forecasts(items, ForecastSort.risk)] == [2, 4]
    assert [i.trip.id for i in filter_forecasts(items, ForecastFilter.critical)] == [2]
    assert [i.trip.id for i in filter_forecasts(items, ForecastFilter.at_risk)] == [2]
    assert len(filter_forecasts(items, ForecastFilter.all)) == 2
