"""Compliance windows, timelines, presence calendar, safe entry and trip forecasts."""
from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_company_employee
from app.models.employee import Employee
from app.schemas.compliance import (
    ComplianceWindow,
    ExpiringDay,
    ForecastFilter,
    ForecastRequest,
    ForecastResult,
    ForecastSort,
    FutureTripForecast,
    PresenceResponse,
    SafeEntryResult,
    SortOrder,
)
from app.services import compliance as compliance_service
from app.services.forecast import filter_forecasts, sort_forecasts
from app.services.schengen import WINDOW_SIZE_DAYS

router = APIRouter(prefix="/employees/{employee_id}", tags=["compliance"])

# A timeline is a calendar view; longer ranges should be paged by the caller
MAX_TIMELINE_DAYS = 3 * 366


@router.get("/compliance", response_model=ComplianceWindow)
def get_compliance_window(
    reference_date: date | None = Query(None, description="Defaults to today"),
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    return compliance_service.compute_window(db, employee, reference_date or date.today())


@router.get("/compliance/timeline", response_model=list[ComplianceWindow])
def get_compliance_timeline(
    start: date = Query(...),
    end: date = Query(...),
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    if end < start:
        raise HTTPException(status_code=400, detail="end must be on or after start")
    if end - start > timedelta(days=MAX_TIMELINE_DAYS):
        raise HTTPException(status_code=400, detail=f"Timeline range cannot exceed {MAX_TIMELINE_DAYS} days")
    return compliance_service.compute_timeline(db, employee, start, end)


@router.get("/presence", response_model=PresenceResponse)
def get_presence_days(
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    days = compliance_service.employee_presence_days(db, employee)
    return PresenceResponse(employee_id=employee.id, total_days=len(days), days=days)


@router.get("/safe-entry", response_model=SafeEntryResult)
def get_safe_entry(
    today: date | None = Query(None, description="Defaults to today"),
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    return compliance_service.safe_entry_for_employee(db, employee, today or date.today())


@router.post("/forecast", response_model=ForecastResult)
def forecast_trip(
    data: ForecastRequest,
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    """What-if check for a planned trip. Nothing is stored."""
    return compliance_service.forecast_trip(db, employee, data)


@router.get("/forecast/future", response_model=list[FutureTripForecast])
def forecast_future_trips(
    today: date | None = Query(None, description="Defaults to today"),
    sort: ForecastSort = Query(ForecastSort.date),
    order: SortOrder = Query(SortOrder.asc),
    risk: ForecastFilter = Query(ForecastFilter.all),
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    """Each stored upcoming trip forecast against the employee's other trips."""
    items = compliance_service.future_trip_forecasts(db, employee, today or date.today())
    return sort_forecasts(filter_forecasts(items, risk), sort, order)


@router.get("/compliance/expiring", response_model=list[ExpiringDay])
def get_expiring_days(
    start: date | None = Query(None, description="Defaults to today"),
    days: int = Query(30, ge=0, le=WINDOW_SIZE_DAYS),
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    return compliance_service.expiring_days_for_employee(db, employee, start or date.today(), days)
