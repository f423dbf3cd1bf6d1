"""Company rows. Companies are provisioned upstream; a placeholder is created the first time one is seen."""
from sqlalchemy.orm import Session
from app.models.company import Company


def ensure_company(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if company:
        return company
    company = Company(id=company_id, name=f"Company {company_id}")
    db.add(company)
    db.flush()
    return company
