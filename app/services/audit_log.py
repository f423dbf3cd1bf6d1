"""Append-only audit log of trip writes, settings changes and compliance alerts.

Rows are never updated or deleted. The alert job also reads the log to decide whether
an alert was already sent in the current window.
"""
from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog

CATEGORY_TRIP_CHANGE = "trip_change"
CATEGORY_COMPLIANCE_ALERT = "compliance_alert"
CATEGORY_SETTINGS_CHANGE = "settings_change"

# Column limits (match model)
_CATEGORY_LEN = 32
_TITLE_LEN = 255
_ACTOR_EMAIL_LEN = 255
_MESSAGE_LEN = 100_000


def _clip(value: str | None, limit: int, default: str | None = None) -> str | None:
    text = (value or "")[:limit].strip()
    return text or default


def _json_value(v: Any) -> Any:
    """Dates, enums and nested containers converted so the JSON column accepts them."""
    if v is None or isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, enum.Enum):
        return v.value
    if isinstance(v, dict):
        return {str(k): _json_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple, set)):
        return [_json_value(x) for x in v]
    return str(v)


def create_log(
    db: Session,
    category: str,
    title: str,
    message: str,
    *,
    company_id: int | None = None,
    employee_id: int | None = None,
    trip_id: int | None = None,
    actor_user_id: int | None = None,
    actor_email: str | None = None,
    meta: dict[str, Any] | None = None,
) -> AuditLog:
    """Add one record and flush; the caller commits or rolls back with the rest of its work."""
    entry = AuditLog(
        category=_clip(category, _CATEGORY_LEN, CATEGORY_TRIP_CHANGE),
        title=_clip(title, _TITLE_LEN, "-"),
        message=_clip(message, _MESSAGE_LEN, "-"),
        company_id=company_id,
        employee_id=employee_id,
        trip_id=trip_id,
        actor_user_id=actor_user_id,
        actor_email=_clip(actor_email, _ACTOR_EMAIL_LEN),
        meta=_json_value(meta) if meta is not None else None,
    )
    db.add(entry)
    db.flush()
    return entry


def find_log(
    db: Session,
    title: str,
    *,
    employee_id: int | None = None,
    since: datetime | None = None,
) -> AuditLog | None:
    q = db.query(AuditLog).filter(AuditLog.title == title)
    if employee_id is not None:
        q = q.filter(AuditLog.employee_id == employee_id)
    if since is not None:
        q = q.filter(AuditLog.created_at >= since)
    return q.first()
