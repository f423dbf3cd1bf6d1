"""Companies and their per-organization compliance settings."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Where compliance alerts are emailed; alerts are only logged when empty
    alert_email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    settings = relationship("CompanySettings", back_populates="company", uselist=False)
    employees = relationship("Employee", back_populates="company")


class CompanySettings(Base):
    """Stored RuleConfig. Rows are validated on write; reads fall back to defaults field by field."""
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), unique=True, nullable=False)

    # Days used: <= amber is safe, <= green is caution, above green is breach
    risk_threshold_green = Column(Integer, nullable=True)
    risk_threshold_amber = Column(Integer, nullable=True)
    future_job_warning_threshold = Column(Integer, nullable=True)
    custom_alert_threshold = Column(Integer, nullable=True)

    notify_70_days = Column(Boolean, nullable=False, default=True)
    notify_85_days = Column(Boolean, nullable=False, default=True)
    notify_90_days = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="settings")
