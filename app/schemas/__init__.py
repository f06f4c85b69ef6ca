"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthorizedIdentity,
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserRecord,
    UserSummary,
    UserUpdateRequest,
)
from app.schemas.health import HealthResponse
from app.schemas.project import (
    PROJECT_TYPES,
    CategoryCount,
    DescriptionUpdate,
    ProjectEnvelope,
    ProjectIn,
    ProjectOut,
)

__all__ = [
    "PROJECT_TYPES",
    "AuthorizedIdentity",
    "AuthResponse",
    "CategoryCount",
    "DescriptionUpdate",
    "HealthResponse",
    "LoginRequest",
    "ProjectEnvelope",
    "ProjectIn",
    "ProjectOut",
    "SignupRequest",
    "UserRecord",
    "UserSummary",
    "UserUpdateRequest",
]
