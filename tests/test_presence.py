"""Tests for the day-presence model and country lookup."""

from __future__ import annotations

import pytest

from app.services.errors import InvalidDateRangeError, UnknownCountryError
from app.services.presence import presence_bounds, presence_days, presence_intervals, total_presence_days
from app.services.schengen import is_schengen_country, normalize_country
from tests.factories import d, make_trip


def test_overlapping_and_adjacent_trips_merge_into_one_interval():
    trips = [
        make_trip("2024-01-05", "2024-01-15", id=2),
        make_trip("2024-01-01", "2024-01-10", id=1),
        make_trip("2024-01-16", "2024-01-20", id=3),
    ]
    assert presence_intervals(trips) == [(d("2024-01-01"), d("2024-01-20"))]
    assert total_presence_days(trips) == 20


def test_ghosted_and_non_schengen_trips_do_not_count():
    trips = [
        make_trip("2024-01-01", "2024-01-05"),
        make_trip("2024-02-01", "2024-02-10", ghosted=True),
        make_trip("2024-03-01", "2024-03-10", country="GB"),
        make_trip("2024-04-01", "2024-04-02", country="MC"),
    ]
    assert total_presence_days(trips) == 7
    assert presence_bounds(trips) == (d("2024-01-01"), d("2024-04-02"))


def test_entry_and_exit_days_both_count():
    assert presence_days([make_trip("2024-05-01", "2024-05-01")]) == [d("2024-05-01")]
    assert total_presence_days([make_trip("2024-05-01", "2024-05-03")]) == 3


def test_compliance_start_clips_earlier_days():
    trips = [make_trip("2024-01-01", "2024-01-10"), make_trip("2023-06-01", "2023-06-30")]
    assert presence_intervals(trips, compliance_start=d("2024-01-06")) == [(d("2024-01-06"), d("2024-01-10"))]


def test_invalid_trip_fails_the_whole_computation():
    trips = [make_trip("2024-01-01", "2024-01-10"), make_trip("2024-02-10", "2024-02-01")]
    with pytest.raises(InvalidDateRangeError):
        presence_intervals(trips)


def test_empty_history_has_no_bounds():
    assert presence_intervals([]) == []
    assert presence_bounds([]) is None


@pytest.mark.parametrize(
    "value, code",
    [("fr", "FR"), (" France ", "FR"), ("Czechia", "CZ"), ("Holy See", "VA"), ("UK", "GB")],
)
def test_normalize_country(value, code):
    assert normalize_country(value) == code


def test_unknown_country_is_rejected():
    with pytest.raises(UnknownCountryError):
        normalize_country("XX")
    with pytest.raises(UnknownCountryError):
        normalize_country("")


def test_schengen_membership():
    assert is_schengen_country("de")
    assert is_schengen_country("SM")
    assert not is_schengen_country("IE")
    assert not is_schengen_country("GB")
