"""Employees whose Schengen presence is tracked."""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import enum


class NationalityType(str, enum.Enum):
    uk_citizen = "uk_citizen"
    eu_schengen_citizen = "eu_schengen_citizen"
    rest_of_world = "rest_of_world"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    nationality_type = Column(SQLEnum(NationalityType), nullable=False, default=NationalityType.uk_citizen)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="employees")
    trips = relationship("Trip", back_populates="employee", cascade="all, delete-orphan")
