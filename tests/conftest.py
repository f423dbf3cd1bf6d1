"""
Pytest fixtures. The app is pointed at an in-memory SQLite DB before it is imported;
each test gets freshly created tables.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALERT_CRON_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ.pop("COMPLIANCE_START_DATE", None)

import pytest  # noqa: E402


@pytest.fixture
def db():
    from app.database import Base, SessionLocal, engine
    import app.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def company(db):
    from app.models.company import Company

    c = Company(id=1, name="Acme Consulting", alert_email="hr@acme.test")
    db.add(c)
    db.commit()
    return c

@pytest.fixture
def employee(db, company):
    from app.models.employee import Employee, NationalityType

    e = Employee(company_id=company.id, name="Alex Morgan", nationality_type=NationalityType.uk_citizen)
    db.add(e)
    db.commit()
    db.refresh(e)
    return e

@pytest.fixture
def auth_headers(company):
    from app.services.auth import create_access_token

    token = create_access_token(user_id=42, email="admin@acme.test", company_id=company.id)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from app.main import app

    return TestClient(app)
