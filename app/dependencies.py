"""Shared dependencies: DB session, current user, company-scoped lookups."""
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.employee import Employee
from app.models.trip import Trip
from app.schemas.auth import CurrentUser, TokenPayload
from app.services.auth import decode_token_with_error
from app.services.trips import get_employee, get_trip

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    payload, _ = decode_token_with_error((credentials.credentials or "").strip())
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        token = TokenPayload.model_validate(payload)
        user_id = int(token.sub)
    except (ValidationError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    return CurrentUser(user_id=user_id, email=token.email, company_id=token.company_id)


def get_company_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Employee:
    """Employees of other companies are reported as missing, not forbidden."""
    employee = get_employee(db, employee_id, company_id=current_user.company_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


def get_company_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> Trip:
    trip = get_trip(db, trip_id, company_id=current_user.company_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip
