"""Append-only audit log for trip changes and compliance alerts.
No updates or deletes - every record is permanent."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from app.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    # No FK: trip rows may be deleted, the log keeps the id and a copy of the dates in meta
    trip_id = Column(Integer, nullable=True, index=True)

    # category: trip_change | compliance_alert | settings_change
    category = Column(String(32), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # Optional structured data (e.g. old/new dates, days_used)
    meta = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    actor_user_id = Column(Integer, nullable=True)
    actor_email = Column(String(255), nullable=True)

    # UTC only - server_default
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
