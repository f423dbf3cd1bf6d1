"""Compliance engine errors.

Input errors are raised before any overlap or window computation runs; the engine
never repairs a malformed interval. A detected overlap is a domain conflict and always
carries the conflicting trip.
"""
from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.schemas.trip import TripSnapshot


class ComplianceError(Exception):
    """Base error for all compliance engine failures."""


class InputError(ComplianceError):
    """Malformed input rejected before computation."""


class InvalidTripError(InputError):
    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid trip {field}: {reason}")


class InvalidDateRangeError(InputError):
    def __init__(self, entry_date: date, exit_date: date):
        self.entry_date = entry_date
        self.exit_date = exit_date
        super().__init__(
            f"Invalid date range: exit ({exit_date.isoformat()}) is before entry ({entry_date.isoformat()})"
        )


class UnknownCountryError(InputError):
    def __init__(self, country: str):
        self.country = country
        super().__init__(f'Unknown country code: "{country}". Use ISO 3166-1 alpha-2 codes.')


class InvalidReferenceDateError(InputError):
    def __init__(self, reference_date: Any, reason: str):
        self.reference_date = reference_date
        self.reason = reason
        super().__init__(f"Invalid reference date: {reason}")


class TripOverlapError(ComplianceError):
    """A write would make two non-ghosted trips of one employee share a day."""

    def __init__(self, conflicting_trip: "TripSnapshot", message: str | None = None):
        self.conflicting_trip = conflicting_trip
        super().__init__(
            message
            or f"Trip overlaps with existing trip {conflicting_trip.id} "
            f"({conflicting_trip.entry_date.isoformat()} - {conflicting_trip.exit_date.isoformat()})"
        )


class InvalidConfigError(ComplianceError):
    def __init__(self, config_key: str, reason: str):
        self.config_key = config_key
        self.reason = reason
        super().__init__(f'Invalid configuration "{config_key}": {reason}')


class EmployeeExemptError(ComplianceError):
    def __init__(self, employee_id: int, nationality_type: str):
        self.employee_id = employee_id
        self.nationality_type = nationality_type
        super().__init__(
            f"Employee {employee_id} ({nationality_type}) is exempt from the 90/180-day rule"
        )
