"""Daily compliance alert job.

For every employee subject to the rule, today's window is computed and the highest
enabled threshold crossed (70/85/90 days, plus the company's custom threshold) raises one
alert. An alert is sent once per employee and threshold within the current window; the
audit log is the record of what was sent.
"""
import logging
from datetime import date, datetime, time, timezone

from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import SessionLocal
from app.models.company import Company
from app.models.employee import Employee
from app.services.audit_log import CATEGORY_COMPLIANCE_ALERT, create_log, find_log
from app.services.compliance import is_subject_to_rule
from app.services.notifications import send_compliance_alert
from app.services.risk import evaluate_window
from app.services.rule_config import get_rule_config, get_settings_row
from app.services.trips import list_trips

logger = logging.getLogger(__name__)


def alert_title(threshold: int) -> str:
    return f"Compliance alert: {threshold} days"


def enabled_thresholds(db: Session, company_id: int) -> list[int]:
    row = get_settings_row(db, company_id)
    config = get_rule_config(db, company_id)
    thresholds = []
    if row is None or row.notify_70_days:
        thresholds.append(70)
    if row is None or row.notify_85_days:
        thresholds.append(85)
    if row is None or row.notify_90_days:
        thresholds.append(90)
    if config.custom_alert_threshold is not None:
        thresholds.append(config.custom_alert_threshold)
    return sorted(set(thresholds))


def run_company_alerts(db: Session, company: Company, today: date) -> list[int]:
    """Returns ids of employees alerted in this run."""
    thresholds = enabled_thresholds(db, company.id)
    if not thresholds:
        return []
    config = get_rule_config(db, company.id)
    compliance_start = get_settings().compliance_start_date
    alerted: list[int] = []

    employees = db.query(Employee).filter(Employee.company_id == company.id).all()
    for employee in employees:
        if not is_subject_to_rule(employee):
            continue
        window = evaluate_window(list_trips(db, employee.id), today, config, compliance_start)
        crossed = [t for t in thresholds if window.days_used >= t]
        if not crossed:
            continue
        threshold = crossed[-1]
        since = datetime.combine(window.window_start, time.min).replace(tzinfo=timezone.utc)
        if find_log(db, alert_title(threshold), employee_id=employee.id, since=since):
            continue

        sent = False
        if company.alert_email:
            sent = send_compliance_alert(
                company.alert_email,
                employee_name=employee.name,
                threshold=threshold,
                days_used=window.days_used,
                days_remaining=window.days_remaining,
                reference_date=today.isoformat(),
            )
        create_log(
            db,
            CATEGORY_COMPLIANCE_ALERT,
            alert_title(threshold),
            f"Employee {employee.id} has used {window.days_used} days in the window ending {today.isoformat()}.",
            company_id=company.id,
            employee_id=employee.id,
            meta={
                "threshold": threshold,
                "days_used": window.days_used,
                "risk_tier": window.risk_tier,
                "email_sent": sent,
            },
        )
        db.commit()
        alerted.append(employee.id)
        logger.info("Compliance alert for employee %s at %s days (email_sent=%s)", employee.id, threshold, sent)
    return alerted


def run_compliance_alert_job(today: date | None = None) -> None:
    """Entry point for the scheduler and the manual trigger endpoint."""
    if not get_settings().alert_cron_enabled:
        return
    today = today or date.today()
    db = SessionLocal()
    try:
        for company in db.query(Company).all():
            try:
                run_company_alerts(db, company, today)
            except Exception:
                db.rollback()
                logger.exception("Compliance alerts failed for company %s", company.id)
    finally:
        db.close()
