"""Company rule settings: risk thresholds, forecast warning and alert toggles."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.services.companies import ensure_company
from app.schemas.auth import CurrentUser
from app.schemas.settings import RuleSettingsResponse, RuleSettingsUpdate
from app.services.audit_log import CATEGORY_SETTINGS_CHANGE, create_log
from app.services.rule_config import save_rule_config, settings_response

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/rules", response_model=RuleSettingsResponse)
def get_rules(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return settings_response(db, current_user.company_id)


@router.put("/rules", response_model=RuleSettingsResponse)
def put_rules(
    data: RuleSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    ensure_company(db, current_user.company_id)
    save_rule_config(db, current_user.company_id, data)
    create_log(
        db,
        CATEGORY_SETTINGS_CHANGE,
        "Rule settings updated",
        f"Rule settings updated for company {current_user.company_id}.",
        company_id=current_user.company_id,
        actor_user_id=current_user.user_id,
        actor_email=current_user.email,
        meta=data.model_dump(),
    )
    db.commit()
    return settings_response(db, current_user.company_id)
