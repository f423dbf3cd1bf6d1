"""Employees of the caller's company."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user, get_company_employee
from app.services.companies import ensure_company
from app.models.employee import Employee
from app.schemas.auth import CurrentUser
from app.schemas.employee import EmployeeCreate, EmployeeResponse
from app.services.compliance import is_subject_to_rule

router = APIRouter(prefix="/employees", tags=["employees"])


def _response(employee: Employee) -> EmployeeResponse:
    out = EmployeeResponse.model_validate(employee)
    out.subject_to_rule = is_subject_to_rule(employee)
    return out


@router.post("/", response_model=EmployeeResponse, status_code=201)
def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    ensure_company(db, current_user.company_id)
    employee = Employee(
        company_id=current_user.company_id,
        name=data.name,
        nationality_type=data.nationality_type,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return _response(employee)


@router.get("/", response_model=list[EmployeeResponse])
def list_employees(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    employees = (
        db.query(Employee)
        .filter(Employee.company_id == current_user.company_id)
        .order_by(Employee.name, Employee.id)
        .all()
    )
    return [_response(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee: Employee = Depends(get_company_employee)):
    return _response(employee)
