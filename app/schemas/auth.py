"""Request/response schemas for the /user endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from app.core.security import PASSWORD_MAX_BYTES, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

Role = Literal["admin", "user"]


def check_password_bytes(v: str) -> str:
    """Reject passwords bcrypt would silently cut off."""
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes (UTF-8)")
    return v


# Passwords are never stripped; names are, before the length check.
NewPassword = Annotated[
    str,
    StringConstraints(min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN),
    AfterValidator(check_password_bytes),
]
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class LoginRequest(BaseModel):
    """Credentials for login. Any non-empty email is accepted; unknown ones fail as InvalidCredentials."""

    email: str = Field(..., min_length=1, max_length=320, description="Account email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class SignupRequest(BaseModel):
    """New account; role defaults to 'user'."""

    name: DisplayName
    email: EmailStr
    password: NewPassword
    role: Role | None = None


class UserUpdateRequest(BaseModel):
    """Partial update of a user; omitted fields are left unchanged."""

    name: DisplayName | None = None
    email: EmailStr | None = None
    password: NewPassword | None = None
    role: Role | None = None


class UserSummary(BaseModel):
    """Non-sensitive user fields returned alongside a token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str


class UserRecord(UserSummary):
    """User as returned by signup and the admin endpoints (never includes the password)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    created_at: datetime | None = Field(default=None, alias="createdAt")


class AuthResponse(BaseModel):
    """Token plus user summary returned after successful login."""

    token: str = Field(..., description="JWT bearer token")
    user: UserSummary


class AuthorizedIdentity(BaseModel):
    """Identity decoded from a verified bearer token."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    role: str


class UserCountResponse(BaseModel):
    count: int
