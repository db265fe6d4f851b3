"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import ConfigDict, EmailStr, Field, StringConstraints, field_validator

from app.schemas.common import CamelModel

MOBILE_PATTERN = r"^\d{10}$"
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

Role = Literal["user", "admin"]

DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
MobileNo = Annotated[str, StringConstraints(strip_whitespace=True, pattern=MOBILE_PATTERN)]


class _EmailModel(CamelModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(_EmailModel):
    """New account; email is stored lower-cased."""

    name: DisplayName
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    mobile_no: MobileNo | None = None


class LoginRequest(_EmailModel):
    """Credentials for login."""

    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class UpdateProfileRequest(CamelModel):
    name: DisplayName | None = None
    mobile_no: MobileNo | None = None


class RefreshTokenRequest(CamelModel):
    refresh_token: str | None = None


class TokenClaims(CamelModel):
    """Identity claims carried by both access and refresh tokens."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    email: str
    role: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class CurrentUser(CamelModel):
    """Authenticated identity produced by the auth gate and passed to handlers."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    role: str


class UserSummary(CamelModel):
    """Outbound user representation; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    mobile_no: str | None = None
    role: str
    is_active: bool
    created_at: datetime


class AuthPayload(CamelModel):
    """Returned by register and login."""

    user: UserSummary
    access_token: str
    refresh_token: str
