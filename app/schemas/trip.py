"""Trip schemas and the immutable snapshot the compliance engine reads."""
from datetime import date
from pydantic import BaseModel, computed_field, field_validator


def _strip_or_none(v: str | None) -> str | None:
    return (v or "").strip() or None


class TripSnapshot(BaseModel):
    """Read-only copy of a trip row; engine functions never see ORM objects."""
    id: int | None = None
    employee_id: int | None = None
    country: str
    entry_date: date
    exit_date: date
    purpose: str | None = None
    is_private: bool = False
    ghosted: bool = False

    class Config:
        from_attributes = True
        frozen = True


class DateInterval(BaseModel):
    entry_date: date
    exit_date: date


class TripCreate(BaseModel):
    country: str
    entry_date: date
    exit_date: date
    purpose: str | None = None
    job_ref: str | None = None
    is_private: bool = False
    ghosted: bool = False

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: str) -> str:
        return (v or "").strip().upper()

    @field_validator("purpose", "job_ref")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class TripUpdate(BaseModel):
    """All optional; only provided fields are updated."""
    country: str | None = None
    entry_date: date | None = None
    exit_date: date | None = None
    purpose: str | None = None
    job_ref: str | None = None
    is_private: bool | None = None
    ghosted: bool | None = None

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: str | None) -> str | None:
        return v.strip().upper() if v else v


class TripResponse(BaseModel):
    id: int
    employee_id: int
    country: str
    entry_date: date
    exit_date: date
    purpose: str | None
    job_ref: str | None
    is_private: bool
    ghosted: bool

    @computed_field
    @property
    def travel_days(self) -> int:
        return (self.exit_date - self.entry_date).days + 1

    class Config:
        from_attributes = True


class OverlapCheckRequest(DateInterval):
    exclude_trip_id: int | None = None


class BulkOverlapRequest(BaseModel):
    trips: list[DateInterval]


class BulkOverlapItem(BaseModel):
    index: int
    has_overlap: bool
    message: str | None = None
