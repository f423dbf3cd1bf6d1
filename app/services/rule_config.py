"""Configuration provider: a company's RuleConfig, falling back to defaults.

Reads never fail. Missing rows and out-of-range stored values are replaced with the
documented defaults; only writes reject an invalid configuration.
"""
import logging

from sqlalchemy.orm import Session

from app.models.company import CompanySettings
from app.schemas.settings import (
    CUSTOM_ALERT_RANGE,
    DEFAULT_AMBER_THRESHOLD,
    DEFAULT_FORECAST_WARNING_THRESHOLD,
    DEFAULT_GREEN_THRESHOLD,
    FORECAST_WARNING_RANGE,
    THRESHOLD_RANGE,
    RuleConfig,
    RuleSettingsResponse,
    RuleSettingsUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_RULE_CONFIG = RuleConfig()


def _in_range(value: int | None, bounds: tuple[int, int]) -> bool:
    return value is not None and bounds[0] <= value <= bounds[1]


def rule_config_from_row(row: CompanySettings | None) -> RuleConfig:
    if row is None:
        return DEFAULT_RULE_CONFIG

    substituted: list[str] = []

    def pick(name: str, value: int | None, bounds: tuple[int, int], default: int) -> int:
        if _in_range(value, bounds):
            return value
        substituted.append(name)
        return default

    green = pick("risk_threshold_green", row.risk_threshold_green, THRESHOLD_RANGE, DEFAULT_GREEN_THRESHOLD)
    amber = pick("risk_threshold_amber", row.risk_threshold_amber, THRESHOLD_RANGE, DEFAULT_AMBER_THRESHOLD)
    if green <= amber:
        substituted.append("risk_thresholds_order")
        green, amber = DEFAULT_GREEN_THRESHOLD, DEFAULT_AMBER_THRESHOLD
    warning = pick(
        "future_job_warning_threshold",
        row.future_job_warning_threshold,
        FORECAST_WARNING_RANGE,
        DEFAULT_FORECAST_WARNING_THRESHOLD,
    )
    custom = row.custom_alert_threshold
    if custom is not None and not _in_range(custom, CUSTOM_ALERT_RANGE):
        substituted.append("custom_alert_threshold")
        custom = None

    if substituted:
        logger.warning(
            "Company %s has invalid stored settings %s; using defaults for those fields",
            row.company_id,
            ", ".join(substituted),
        )
    return RuleConfig(
        green_threshold=green,
        amber_threshold=amber,
        forecast_warning_threshold=warning,
        custom_alert_threshold=custom,
    )


def get_settings_row(db: Session, company_id: int) -> CompanySettings | None:
    return db.query(CompanySettings).filter(CompanySettings.company_id == company_id).first()


def get_rule_config(db: Session, company_id: int) -> RuleConfig:
    return rule_config_from_row(get_settings_row(db, company_id))


def settings_response(db: Session, company_id: int) -> RuleSettingsResponse:
    row = get_settings_row(db, company_id)
    config = rule_config_from_row(row)
    return RuleSettingsResponse(
        company_id=company_id,
        is_default=row is None,
        green_threshold=config.green_threshold,
        amber_threshold=config.amber_threshold,
        forecast_warning_threshold=config.forecast_warning_threshold,
        custom_alert_threshold=config.custom_alert_threshold,
        notify_70_days=row.notify_70_days if row else True,
        notify_85_days=row.notify_85_days if row else True,
        notify_90_days=row.notify_90_days if row else True,
    )


def save_rule_config(db: Session, company_id: int, data: RuleSettingsUpdate) -> CompanySettings:
    """Validate then store. Raises InvalidConfigError; nothing is written on failure."""
    config = RuleConfig(
        green_threshold=data.green_threshold,
        amber_threshold=data.amber_threshold,
        forecast_warning_threshold=data.forecast_warning_threshold,
        custom_alert_threshold=data.custom_alert_threshold,
    )
    row = get_settings_row(db, company_id)
    if row is None:
        row = CompanySettings(company_id=company_id)
    row.risk_threshold_green = config.green_threshold
    row.risk_threshold_amber = config.amber_threshold
    row.future_job_warning_threshold = config.forecast_warning_threshold
    row.custom_alert_threshold = config.custom_alert_threshold
    row.notify_70_days = data.notify_70_days
    row.notify_85_days = data.notify_85_days
    row.notify_90_days = data.notify_90_days
    db.add(row)
    db.flush()
    return row
