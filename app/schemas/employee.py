"""Employee schemas."""
from pydantic import BaseModel, field_validator
from app.models.employee import NationalityType


class EmployeeCreate(BaseModel):
    name: str
    nationality_type: NationalityType = NationalityType.uk_citizen

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Name is required")
        return v


class EmployeeResponse(BaseModel):
    id: int
    company_id: int
    name: str
    nationality_type: NationalityType
    subject_to_rule: bool = True

    class Config:
        from_attributes = True
