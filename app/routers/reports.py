"""Company-wide compliance report, CSV export and upcoming-trip forecasts."""
from datetime import date
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.auth import CurrentUser
from app.schemas.compliance import ForecastFilter, ForecastSort, FutureTripForecast, SortOrder
from app.schemas.report import ComplianceReport
from app.services.forecast import filter_forecasts, sort_forecasts
from app.services.reports import build_company_report, build_future_trip_forecasts, report_to_csv

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/compliance", response_model=ComplianceReport)
def compliance_report(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return build_company_report(db, current_user.company_id, reference_date or date.today())


@router.get("/compliance.csv")
def compliance_report_csv(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    ref = reference_date or date.today()
    report = build_company_report(db, current_user.company_id, ref)
    return Response(
        content=report_to_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="compliance-{ref.isoformat()}.csv"'},
    )


@router.get("/future-trips", response_model=list[FutureTripForecast])
def future_trip_forecasts(
    today: date | None = Query(None, description="Defaults to today"),
    sort: ForecastSort = Query(ForecastSort.date),
    order: SortOrder = Query(SortOrder.asc),
    risk: ForecastFilter = Query(ForecastFilter.all),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Upcoming trips of every subject employee, with forecast flags, for the alerts view."""
    items = build_future_trip_forecasts(db, current_user.company_id, today or date.today())
    return sort_forecasts(filter_forecasts(items, risk), sort, order)
