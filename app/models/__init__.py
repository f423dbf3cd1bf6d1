"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.company import Company, CompanySettings
from app.models.employee import Employee, NationalityType
from app.models.trip import Trip
from app.models.audit_log import AuditLog

__all__ = [
    "Company",
    "CompanySettings",
    "Employee",
    "NationalityType",
    "Trip",
    "AuditLog",
]
