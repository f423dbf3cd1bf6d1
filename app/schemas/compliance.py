"""Computed, never-persisted compliance values."""
from datetime import date
from pydantic import BaseModel
from app.schemas.trip import TripSnapshot
import enum


class RiskTier(str, enum.Enum):
    safe = "safe"
    caution = "caution"
    breach = "breach"


class OverlapResult(BaseModel):
    has_overlap: bool
    conflicting_trip: TripSnapshot | None = None
    message: str | None = None


class ComplianceWindow(BaseModel):
    reference_date: date
    window_start: date
    window_end: date
    days_used: int
    days_remaining: int  # negative once over the cap
    risk_tier: RiskTier
    is_compliant: bool


class ForecastRequest(BaseModel):
    country: str
    entry_date: date
    exit_date: date


class ForecastResult(BaseModel):
    worst_case_days_used: int
    breach_flag: bool
    warning_flag: bool
    worst_case_date: date
    is_schengen: bool = True
    trip_duration: int
    days_used_before_trip: int
    days_remaining_after_trip: int
    risk_tier: RiskTier
    compliant_from_date: date | None = None


class SafeEntryResult(BaseModel):
    can_enter_today: bool
    earliest_safe_date: date | None = None
    days_until_compliant: int
    days_used_on_entry: int
    max_stay_days: int


class PresenceResponse(BaseModel):
    employee_id: int
    total_days: int
    days: list[date]


class ExpiringDay(BaseModel):
    day: date
    expiring_days: int
    days_used: int
    days_remaining: int


class ForecastSort(str, enum.Enum):
    date = "date"
    employee = "employee"
    risk = "risk"


class SortOrder(str, enum.Enum):
    asc = "asc"
    desc = "desc"


class ForecastFilter(str, enum.Enum):
    all = "all"
    at_risk = "at_risk"  # warning or breach
    critical = "critical"  # breach only


class FutureTripForecast(BaseModel):
    """Forecast of one stored upcoming trip against the rest of the employee's trips."""
    employee_id: int | None = None
    employee_name: str | None = None
    trip: TripSnapshot
    forecast: ForecastResult
