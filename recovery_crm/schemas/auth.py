"""Authentication-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from recovery_crm.db.enums import DEFAULT_ROLE, Role
from recovery_crm.schemas.user import UserRead
from recovery_crm.utils.normalization import normalize_email, normalize_name


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    role: Role = DEFAULT_ROLE

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        cleaned = normalize_name(v)
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class LoginRequest(BaseModel):
    """Login by username or email."""
    username: str | None = None
    email: str | None = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not (self.username or self.email):
            raise ValueError("username or email is required")
        return self


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class LogoutRequest(BaseModel):
    """user_id may be omitted when a Bearer token is sent."""
    user_id: UUID | None = None


class LogoutResponse(BaseModel):
    message: str
    login_time: datetime
    logout_time: datetime
    duration: str
