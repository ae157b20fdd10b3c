"""User request/response schemas - API contract and validation."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, Field


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


Name = Annotated[str, BeforeValidator(_strip), Field(min_length=1, max_length=255)]
NormalizedEmail = Annotated[EmailStr, BeforeValidator(_normalize_email)]
# bcrypt reads at most 72 bytes and refuses NUL
PASSWORD_MAX_BYTES = 72


def _check_bcrypt_input(value: str) -> str:
    if "\x00" in value:
        raise ValueError("Password may not contain NUL characters")
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password may be at most {PASSWORD_MAX_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=1), AfterValidator(_check_bcrypt_input)]


class UserCreate(BaseModel):
    name: Name
    email: NormalizedEmail
    password: Password


class UserUpdate(BaseModel):
    """Partial profile update. Only fields actually sent are applied."""

    model_config = {"extra": "forbid"}

    name: Name | None = None
    email: NormalizedEmail | None = None
    password: Password | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user: no password hash, sessions or avatar bytes."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
