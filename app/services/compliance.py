"""Compliance entry points for request handlers.

Each call takes one snapshot of an employee's trips and the company's RuleConfig, then
hands them to the pure engine functions. Results are recomputed on every call and never
stored, so a trip change can never leave a stale window behind.
"""
from datetime import date

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.employee import Employee, NationalityType
from app.schemas.compliance import (
    ComplianceWindow,
    ExpiringDay,
    ForecastRequest,
    ForecastResult,
    FutureTripForecast,
    OverlapResult,
    SafeEntryResult,
)
from app.schemas.trip import DateInterval, TripSnapshot
from app.services.errors import EmployeeExemptError
from app.services.forecast import forecast, forecast_future_trips
from app.services.presence import presence_days
from app.services.risk import evaluate_timeline, evaluate_window
from app.services.rule_config import get_rule_config
from app.services.safe_entry import project_expiring_days, safe_entry_info
from app.services.schengen import normalize_country
from app.services.trip_overlap import check_overlap
from app.services.trips import list_trips

EXEMPT_NATIONALITIES = frozenset({NationalityType.eu_schengen_citizen})


def is_subject_to_rule(employee: Employee) -> bool:
    return employee.nationality_type not in EXEMPT_NATIONALITIES


def _require_subject(employee: Employee) -> None:
    if not is_subject_to_rule(employee):
        raise EmployeeExemptError(employee.id, getattr(employee.nationality_type, "value", str(employee.nationality_type)))


def _compliance_start() -> date | None:
    return get_settings().compliance_start_date


def compute_window(db: Session, employee: Employee, reference_date: date) -> ComplianceWindow:
    _require_subject(employee)
    config = get_rule_config(db, employee.company_id)
    return evaluate_window(list_trips(db, employee.id), reference_date, config, _compliance_start())


def compute_timeline(db: Session, employee: Employee, start: date, end: date) -> list[ComplianceWindow]:
    _require_subject(employee)
    config = get_rule_config(db, employee.company_id)
    return evaluate_timeline(list_trips(db, employee.id), start, end, config, _compliance_start())


def employee_presence_days(db: Session, employee: Employee) -> list[date]:
    return presence_days(list_trips(db, employee.id), _compliance_start())


def check_employee_overlap(
    db: Session,
    employee: Employee,
    candidate: DateInterval,
    exclude_trip_id: int | None = None,
) -> OverlapResult:
    """Advisory check for trip-editing forms; the write path checks again under lock."""
    return check_overlap(employee.id, candidate, list_trips(db, employee.id), exclude_trip_id)


def forecast_trip(db: Session, employee: Employee, request: ForecastRequest) -> ForecastResult:
    _require_subject(employee)
    config = get_rule_config(db, employee.company_id)
    candidate = TripSnapshot(
        employee_id=employee.id,
        country=normalize_country(request.country),
        entry_date=request.entry_date,
        exit_date=request.exit_date,
    )
    return forecast(list_trips(db, employee.id), candidate, config, _compliance_start())


def safe_entry_for_employee(db: Session, employee: Employee, today: date) -> SafeEntryResult:
    _require_subject(employee)
    return safe_entry_info(list_trips(db, employee.id), today, _compliance_start())


def future_trip_forecasts(db: Session, employee: Employee, today: date) -> list[FutureTripForecast]:
    """Forecasts for the employee's stored trips entering on or after today."""
    _require_subject(employee)
    config = get_rule_config(db, employee.company_id)
    return [
        item.model_copy(update={"employee_name": employee.name})
        for item in forecast_future_trips(list_trips(db, employee.id), today, config, _compliance_start())
    ]


def expiring_days_for_employee(db: Session, employee: Employee, from_date: date, days: int) -> list[ExpiringDay]:
    _require_subject(employee)
    return project_expiring_days(list_trips(db, employee.id), from_date, days, _compliance_start())
