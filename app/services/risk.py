"""Risk classifier: days used plus configured thresholds to a risk tier."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from app.schemas.compliance import ComplianceWindow, RiskTier
from app.schemas.settings import RuleConfig
from app.schemas.trip import TripSnapshot
from app.services.presence import presence_intervals
from app.services.window import (
    as_reference_date,
    days_remaining,
    days_used_in_intervals,
    is_compliant,
    scan_intervals,
    window_bounds,
)


def classify(days_used: int, config: RuleConfig) -> RiskTier:
    """safe up to amber, caution up to green, breach above green (always above 90).

    The config was validated when it was stored or built; it is not re-checked here.
    """
    if days_used <= config.amber_threshold:
        return RiskTier.safe
    if days_used <= config.green_threshold:
        return RiskTier.caution
    return RiskTier.breach


def make_window(reference_date: date, used: int, config: RuleConfig) -> ComplianceWindow:
    window_start, window_end = window_bounds(reference_date)
    return ComplianceWindow(
        reference_date=reference_date,
        window_start=window_start,
        window_end=window_end,
        days_used=used,
        days_remaining=days_remaining(used),
        risk_tier=classify(used, config),
        is_compliant=is_compliant(used),
    )


def evaluate_window(
    trips: Iterable[TripSnapshot],
    reference_date: date,
    config: RuleConfig,
    compliance_start: date | None = None,
) -> ComplianceWindow:
    reference_date = as_reference_date(reference_date)
    used = days_used_in_intervals(presence_intervals(trips, compliance_start), reference_date)
    return make_window(reference_date, used, config)


def evaluate_timeline(
    trips: Iterable[TripSnapshot],
    start: date,
    end: date,
    config: RuleConfig,
    compliance_start: date | None = None,
) -> list[ComplianceWindow]:
    intervals = presence_intervals(trips, compliance_start)
    return [make_window(day, used, config) for day, used in scan_intervals(intervals, start, end)]
