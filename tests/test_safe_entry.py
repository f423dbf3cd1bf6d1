"""Tests for earliest safe entry, maximum stay and day expiry."""

from __future__ import annotations

import random
from datetime import timedelta

from app.services.safe_entry import earliest_safe_entry, max_stay_days, project_expiring_days, safe_entry_info
from app.services.window import days_used_series
from tests.factories import d, make_trip

FULL = [make_trip("2024-01-01", "2024-03-30")]


def _worst_with_stay(trips, entry, length):
    """Brute-force worst window count once a stay of `length` days from `entry` is added."""
    days = set()
    for t in trips + [make_trip(entry.isoformat(), (entry + timedelta(days=length - 1)).isoformat())]:
        day = t.entry_date
        while day <= t.exit_date:
            days.add(day)
            day += timedelta(days=1)
    worst = 0
    # windows ending from the entry day until the last one holding a stay day
    for offset in range(0, length + 179):
        ref = entry + timedelta(days=offset)
        worst = max(worst, sum(1 for x in days if ref - timedelta(days=179) <= x <= ref))
    return worst


def test_no_history_allows_a_full_stay():
    info = safe_entry_info([], d("2024-05-01"))
    assert info.can_enter_today is True
    assert info.earliest_safe_date is None
    assert info.days_until_compliant == 0
    assert info.max_stay_days == 90


def test_used_allowance_must_age_out_first():
    today = d("2024-03-31")
    assert earliest_safe_entry(FULL, today) == d("2024-06-29")
    info = safe_entry_info(FULL, today)
    assert info.can_enter_today is False
    assert info.earliest_safe_date == d("2024-06-29")
    assert info.days_until_compliant == 90
    assert info.days_used_on_entry == 89
    assert info.max_stay_days == 90


def test_max_stay_is_limited_by_recent_days():
    trips = [make_trip("2024-01-01", "2024-02-29")]
    assert max_stay_days(trips, d("2024-03-01")) == 30


def test_recorded_days_inside_the_stay_are_not_counted_twice():
    trips = [make_trip("2024-01-01", "2024-02-29"), make_trip("2024-03-05", "2024-03-10")]
    assert max_stay_days(trips, d("2024-03-01")) == 30


def test_max_stay_accounts_for_recorded_later_trips():
    trips = [make_trip("2024-04-15", "2024-05-14")]
    entry = d("2024-01-01")
    assert max_stay_days(trips, entry) == 60
    assert safe_entry_info(trips, entry).max_stay_days == 60
    assert _worst_with_stay(trips, entry, 60) == 90
    assert _worst_with_stay(trips, entry, 61) == 91


def test_max_stay_matches_brute_force_on_random_histories():
    rng = random.Random(20240101)
    base = d("2024-01-01")
    for _ in range(25):
        trips = []
        cursor = base - timedelta(days=200)
        while cursor < base + timedelta(days=200):
            cursor += timedelta(days=rng.randint(1, 40))
            length = rng.randint(1, 25)
            trips.append(make_trip(cursor.isoformat(), (cursor + timedelta(days=length - 1)).isoformat()))
            cursor += timedelta(days=length)
        entry = base + timedelta(days=rng.randint(0, 60))
        stay = max_stay_days(trips, entry)
        if stay:
            assert _worst_with_stay(trips, entry, stay) <= 90
        if stay < 90:
            assert _worst_with_stay(trips, entry, stay + 1) > 90


def test_earliest_safe_entry_is_today_when_entry_is_possible():
    today = d("2024-02-01")
    assert earliest_safe_entry([make_trip("2024-01-01", "2024-01-10")], today) == today
    assert safe_entry_info([make_trip("2024-01-01", "2024-01-10")], today).earliest_safe_date is None


def test_earliest_safe_entry_is_none_when_no_day_allows_entry():
    trips = [make_trip("2024-01-01", "2024-12-31")]
    assert earliest_safe_entry(trips, d("2024-07-01")) is None
    info = safe_entry_info(trips, d("2024-07-01"))
    assert info.can_enter_today is False
    assert info.earliest_safe_date is None
    assert info.max_stay_days == 0


def test_expiring_days_outlook():
    outlook = project_expiring_days(FULL, d("2024-06-28"), 3)
    assert [o.day for o in outlook] == [d("2024-06-28"), d("2024-06-29"), d("2024-06-30"), d("2024-07-01")]
    assert [o.expiring_days for o in outlook] == [0, 1, 1, 1]
    assert [o.days_used for o in outlook] == [90, 89, 88, 87]
    assert outlook[-1].days_remaining == 3


def test_expiring_days_agree_with_the_window_series():
    trips = [make_trip("2023-12-01", "2023-12-20"), make_trip("2024-06-10", "2024-06-12")]
    outlook = project_expiring_days(trips, d("2024-05-25"), 30)
    series = days_used_series(trips, d("2024-05-25"), d("2024-06-24"))
    assert [o.days_used for o in outlook] == [used for _, used in series]
    assert sum(o.expiring_days for o in outlook) == 20
