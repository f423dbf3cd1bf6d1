"""Report builder: per-employee compliance rows for dashboards and CSV export."""
import csv
import io
from datetime import date

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.employee import Employee
from app.schemas.compliance import FutureTripForecast, RiskTier
from app.schemas.report import ComplianceReport, EmployeeComplianceRow
from app.services.compliance import future_trip_forecasts, is_subject_to_rule
from app.services.risk import evaluate_window
from app.services.rule_config import get_rule_config
from app.services.trips import list_trips

CSV_COLUMNS = [
    "employee_id",
    "employee_name",
    "nationality_type",
    "exempt",
    "reference_date",
    "days_used",
    "days_remaining",
    "risk_tier",
]

# Leading characters spreadsheets treat as formulas
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def sanitize_csv_value(value) -> str:
    text = "" if value is None else str(value)
    if text.startswith(_FORMULA_PREFIXES):
        return "'" + text
    return text


def build_company_report(db: Session, company_id: int, reference_date: date) -> ComplianceReport:
    """One window per subject employee; the company's config is read once for all of them."""
    config = get_rule_config(db, company_id)
    compliance_start = get_settings().compliance_start_date
    employees = (
        db.query(Employee)
        .filter(Employee.company_id == company_id)
        .order_by(Employee.name, Employee.id)
        .all()
    )
    rows: list[EmployeeComplianceRow] = []
    for employee in employees:
        exempt = not is_subject_to_rule(employee)
        window = None
        if not exempt:
            window = evaluate_window(list_trips(db, employee.id), reference_date, config, compliance_start)
        rows.append(
            EmployeeComplianceRow(
                employee_id=employee.id,
                employee_name=employee.name,
                nationality_type=employee.nationality_type,
                exempt=exempt,
                window=window,
            )
        )

    tiers = [r.window.risk_tier for r in rows if r.window is not None]
    return ComplianceReport(
        company_id=company_id,
        reference_date=reference_date,
        total_employees=len(rows),
        exempt_count=sum(1 for r in rows if r.exempt),
        safe_count=tiers.count(RiskTier.safe),
        caution_count=tiers.count(RiskTier.caution),
        breach_count=tiers.count(RiskTier.breach),
        rows=rows,
    )


def report_to_csv(report: ComplianceReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_COLUMNS)
    for row in report.rows:
        window = row.window
        writer.writerow(
            [
                sanitize_csv_value(row.employee_id),
                sanitize_csv_value(row.employee_name),
                sanitize_csv_value(row.nationality_type.value),
                "yes" if row.exempt else "no",
                report.reference_date.isoformat(),
                "" if window is None else window.days_used,
                "" if window is None else window.days_remaining,
                "exempt" if window is None else window.risk_tier.value,
            ]
        )
    return buf.getvalue()


def build_future_trip_forecasts(db: Session, company_id: int, today: date) -> list[FutureTripForecast]:
    """Upcoming-trip forecasts for every subject employee of the company, unsorted."""
    employees = db.query(Employee).filter(Employee.company_id == company_id).all()
    items: list[FutureTripForecast] = []
    for employee in employees:
        if is_subject_to_rule(employee):
            items.extend(future_trip_forecasts(db, employee, today))
    return items
