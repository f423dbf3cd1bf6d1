"""Trip records: one inclusive entry/exit interval per row."""
from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Trip(Base):
    __tablename__ = "trips"
    __table_args__ = (CheckConstraint("exit_date >= entry_date", name="ck_trips_exit_after_entry"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)

    country = Column(String(2), nullable=False)  # ISO 3166-1 alpha-2
    entry_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=False)

    purpose = Column(String(500), nullable=True)
    job_ref = Column(String(100), nullable=True)
    # Display only; private trips still count
    is_private = Column(Boolean, nullable=False, default=False)
    # Kept on record but excluded from day counting and overlap checks
    ghosted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", back_populates="trips")
