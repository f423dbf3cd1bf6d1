"""Trip persistence: every write is checked by the interval validator under a per-employee lock.

The employee row is locked (SELECT ... FOR UPDATE) before the overlap check, so two
concurrent writes for one employee cannot both pass the check. Callers commit on success
and roll back on error, which releases the lock.
"""
import logging

from sqlalchemy.orm import Session

from app.models.employee import Employee
from app.models.trip import Trip
from app.schemas.auth import CurrentUser
from app.schemas.trip import DateInterval, TripCreate, TripSnapshot, TripUpdate
from app.services.audit_log import CATEGORY_TRIP_CHANGE, create_log
from app.services.schengen import normalize_country
from app.services.trip_overlap import ensure_no_overlap, validate_interval

logger = logging.getLogger(__name__)


def get_employee(db: Session, employee_id: int, company_id: int | None = None) -> Employee | None:
    q = db.query(Employee).filter(Employee.id == employee_id)
    if company_id is not None:
        q = q.filter(Employee.company_id == company_id)
    return q.first()


def get_trip(db: Session, trip_id: int, company_id: int | None = None) -> Trip | None:
    q = db.query(Trip).filter(Trip.id == trip_id)
    if company_id is not None:
        q = q.filter(Trip.company_id == company_id)
    return q.first()


def lock_employee(db: Session, employee_id: int) -> Employee | None:
    return db.query(Employee).filter(Employee.id == employee_id).with_for_update().first()


def list_trip_rows(db: Session, employee_id: int) -> list[Trip]:
    return (
        db.query(Trip)
        .filter(Trip.employee_id == employee_id)
        .order_by(Trip.entry_date, Trip.id)
        .all()
    )


def list_trips(db: Session, employee_id: int) -> list[TripSnapshot]:
    """Snapshot of every trip, ghosted ones included; the engine filters them."""
    return [TripSnapshot.model_validate(t) for t in list_trip_rows(db, employee_id)]


def _actor_kwargs(actor: CurrentUser | None) -> dict:
    if actor is None:
        return {}
    return {"actor_user_id": actor.user_id, "actor_email": actor.email}


def _trip_meta(trip: Trip) -> dict:
    return {
        "country": trip.country,
        "entry_date": trip.entry_date,
        "exit_date": trip.exit_date,
        "ghosted": bool(trip.ghosted),
    }


def create_trip(db: Session, employee: Employee, data: TripCreate, actor: CurrentUser | None = None) -> Trip:
    """Raises InputError for malformed data and TripOverlapError on conflict."""
    validate_interval(data.entry_date, data.exit_date)
    country = normalize_country(data.country)

    lock_employee(db, employee.id)
    if not data.ghosted:
        candidate = DateInterval(entry_date=data.entry_date, exit_date=data.exit_date)
        ensure_no_overlap(employee.id, candidate, list_trips(db, employee.id))

    trip = Trip(
        employee_id=employee.id,
        company_id=employee.company_id,
        country=country,
        entry_date=data.entry_date,
        exit_date=data.exit_date,
        purpose=data.purpose,
        job_ref=data.job_ref,
        is_private=data.is_private,
        ghosted=data.ghosted,
    )
    db.add(trip)
    db.flush()
    create_log(
        db,
        CATEGORY_TRIP_CHANGE,
        "Trip created",
        f"Trip {trip.id} created for employee {employee.id}: {country} {trip.entry_date} to {trip.exit_date}.",
        company_id=employee.company_id,
        employee_id=employee.id,
        trip_id=trip.id,
        meta=_trip_meta(trip),
        **_actor_kwargs(actor),
    )
    logger.info("Created trip %s for employee %s", trip.id, employee.id)
    return trip


def update_trip(db: Session, trip: Trip, data: TripUpdate, actor: CurrentUser | None = None) -> Trip:
    """Apply only the provided fields. The result is re-validated as a whole."""
    changes = data.model_dump(exclude_unset=True)
    entry_date = changes.get("entry_date") or trip.entry_date
    exit_date = changes.get("exit_date") or trip.exit_date
    ghosted = changes["ghosted"] if changes.get("ghosted") is not None else bool(trip.ghosted)
    validate_interval(entry_date, exit_date)
    if changes.get("country"):
        changes["country"] = normalize_country(changes["country"])

    lock_employee(db, trip.employee_id)
    if not ghosted:
        candidate = DateInterval(entry_date=entry_date, exit_date=exit_date)
        ensure_no_overlap(trip.employee_id, candidate, list_trips(db, trip.employee_id), exclude_trip_id=trip.id)

    old = _trip_meta(trip)
    for field, value in changes.items():
        if value is None and field in ("country", "entry_date", "exit_date", "is_private", "ghosted"):
            continue
        setattr(trip, field, value)
    db.add(trip)
    db.flush()
    create_log(
        db,
        CATEGORY_TRIP_CHANGE,
        "Trip updated",
        f"Trip {trip.id} updated for employee {trip.employee_id}.",
        company_id=trip.company_id,
        employee_id=trip.employee_id,
        trip_id=trip.id,
        meta={"old": old, "new": _trip_meta(trip)},
        **_actor_kwargs(actor),
    )
    return trip


def delete_trip(db: Session, trip: Trip, actor: CurrentUser | None = None) -> None:
    lock_employee(db, trip.employee_id)
    create_log(
        db,
        CATEGORY_TRIP_CHANGE,
        "Trip deleted",
        f"Trip {trip.id} deleted for employee {trip.employee_id}.",
        company_id=trip.company_id,
        employee_id=trip.employee_id,
        trip_id=trip.id,
        meta=_trip_meta(trip),
        **_actor_kwargs(actor),
    )
    db.delete(trip)
    db.flush()
