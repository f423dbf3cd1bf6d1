"""Manual trigger for the daily compliance alert job."""
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.models.company import Company
from app.schemas.auth import CurrentUser
from app.services.compliance_alerts import run_company_alerts

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/run-compliance-alerts")
def trigger_compliance_alerts(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Run the alert job for the caller's company only."""
    company = db.query(Company).filter(Company.id == current_user.company_id).first()
    if not company:
        return {"status": "ok", "alerted_employee_ids": []}
    alerted = run_company_alerts(db, company, date.today())
    return {"status": "ok", "alerted_employee_ids": alerted}
