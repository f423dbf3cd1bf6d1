"""Auth boundary schemas. Login and MFA live outside this service; only tokens are read."""
from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str
    email: str | None = None
    company_id: int
    exp: int | None = None


class CurrentUser(BaseModel):
    user_id: int
    email: str | None = None
    company_id: int
