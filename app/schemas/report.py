"""Company compliance report schemas."""
from datetime import date
from pydantic import BaseModel
from app.models.employee import NationalityType
from app.schemas.compliance import ComplianceWindow


class EmployeeComplianceRow(BaseModel):
    employee_id: int
    employee_name: str
    nationality_type: NationalityType
    exempt: bool
    window: ComplianceWindow | None = None


class ComplianceReport(BaseModel):
    company_id: int
    reference_date: date
    total_employees: int
    exempt_count: int
    safe_count: int
    caution_count: int
    breach_count: int
    rows: list[EmployeeComplianceRow]
