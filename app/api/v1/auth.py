"""Login/signup, user management, and the auth dependencies (get_current_identity, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import ROLE_ADMIN, TokenCodec
from app.models import User
from app.schemas.auth import (
    AuthorizedIdentity,
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserCountResponse,
    UserRecord,
    UserUpdateRequest,
)
from app.services import users as user_service
from app.services.auth import AuthService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_auth_service(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthService:
    return AuthService(db, codec, request.app.state.login_policy)


def authorize(
    credentials: HTTPAuthorizationCredentials | None,
    codec: TokenCodec,
    require_admin: bool = False,
) -> AuthorizedIdentity:
    """
    Check a bearer credential and return the identity it encodes.

    Unauthenticated if absent, TokenInvalid/TokenExpired from the codec, Forbidden
    when require_admin is set and the role is not admin. No database access.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    claims = codec.decode(credentials.credentials)
    if require_admin and claims.role != ROLE_ADMIN:
        raise Forbidden()
    return AuthorizedIdentity(user_id=claims.user_id, role=claims.role)


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthorizedIdentity:
    """Dependency: require a valid Bearer JWT. Raises 401 if missing, invalid or expired."""
    return authorize(credentials, codec)


def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthorizedIdentity:
    """Dependency: require a valid token with role 'admin'. Raises 403 for non-admin."""
    return authorize(credentials, codec, require_admin=True)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/authenticate", response_model=AuthResponse)
def authenticate(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT and the user summary.
    Include the token in the Authorization header as: Bearer <token>
    """
    return service.authenticate(body.email, body.password)


@router.post("/signup", response_model=UserRecord, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserRecord:
    """Register an account. Role defaults to 'user'; 400 if the email is taken."""
    user = service.signup(body.name, body.email, body.password, body.role)
    return UserRecord.model_validate(user)


@router.get("/me", response_model=AuthorizedIdentity)
def me(
    identity: Annotated[AuthorizedIdentity, Depends(get_current_identity)],
) -> AuthorizedIdentity:
    """Return the identity encoded in the caller's token."""
    return identity


@router.get("/count", response_model=UserCountResponse)
def count_users(
    _identity: Annotated[AuthorizedIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserCountResponse:
    return UserCountResponse(count=user_service.count_users(db))


@router.get("/getall", response_model=list[UserRecord])
def list_users(
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRecord]:
    """List all users (admin only)."""
    return [UserRecord.model_validate(u) for u in user_service.list_users(db)]


@router.get("/getbyid/{user_id}", response_model=UserRecord)
def get_user(
    user_id: int,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    return UserRecord.model_validate(_get_user_or_404(db, user_id))


@router.put("/update/{user_id}", response_model=UserRecord)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    """Update name, email, password or role (admin only). Passwords are re-hashed."""
    user = _get_user_or_404(db, user_id)
    return UserRecord.model_validate(user_service.update_user(db, user, body))


@router.delete("/delete/{user_id}", response_model=UserRecord)
def delete_user(
    user_id: int,
    _admin: Annotated[AuthorizedIdentity, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    """Delete a user (admin only) and return the deleted record."""
    user = _get_user_or_404(db, user_id)
    record = UserRecord.model_validate(user)
    user_service.delete_user(db, user)
    return record
