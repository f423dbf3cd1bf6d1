"""Trip create/edit/delete. Every write passes the interval validator under the employee lock."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user, get_company_employee, get_company_trip
from app.models.employee import Employee
from app.models.trip import Trip
from app.schemas.auth import CurrentUser
from app.schemas.compliance import OverlapResult
from app.schemas.trip import (
    BulkOverlapItem,
    BulkOverlapRequest,
    OverlapCheckRequest,
    TripCreate,
    TripResponse,
    TripUpdate,
)
from app.services import trips as trip_service
from app.services.compliance import check_employee_overlap
from app.services.trip_overlap import check_bulk_overlaps

router = APIRouter(tags=["trips"])


@router.get("/employees/{employee_id}/trips", response_model=list[TripResponse])
def list_trips(
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    return [TripResponse.model_validate(t) for t in trip_service.list_trip_rows(db, employee.id)]


@router.post("/employees/{employee_id}/trips", response_model=TripResponse, status_code=201)
def create_trip(
    data: TripCreate,
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    trip = trip_service.create_trip(db, employee, data, actor=current_user)
    db.commit()
    db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.post("/employees/{employee_id}/trips/check-overlap", response_model=OverlapResult)
def check_overlap(
    data: OverlapCheckRequest,
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    """Advisory check for trip forms; the write itself is checked again."""
    return check_employee_overlap(db, employee, data, exclude_trip_id=data.exclude_trip_id)


@router.post("/employees/{employee_id}/trips/check-overlap/bulk", response_model=list[BulkOverlapItem])
def check_overlap_bulk(
    data: BulkOverlapRequest,
    employee: Employee = Depends(get_company_employee),
    db: Session = Depends(get_db),
):
    return check_bulk_overlaps(employee.id, data.trips, trip_service.list_trips(db, employee.id))


@router.get("/trips/{trip_id}", response_model=TripResponse)
def get_trip(trip: Trip = Depends(get_company_trip)):
    return TripResponse.model_validate(trip)


@router.patch("/trips/{trip_id}", response_model=TripResponse)
def update_trip(
    data: TripUpdate,
    trip: Trip = Depends(get_company_trip),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    trip = trip_service.update_trip(db, trip, data, actor=current_user)
    db.commit()
    db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.delete("/trips/{trip_id}", status_code=204)
def delete_trip(
    trip: Trip = Depends(get_company_trip),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    trip_service.delete_trip(db, trip, actor=current_user)
    db.commit()
