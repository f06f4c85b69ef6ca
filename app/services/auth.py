"""Credential checks and token issuance: authenticate and signup."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AccessDenied, DuplicateEmail, InvalidCredentials
from app.core.security import ROLE_ADMIN, ROLE_USER, TokenCodec, hash_password, verify_password
from app.models import User
from app.schemas.auth import AuthResponse, UserSummary

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


@dataclass(frozen=True)
class LoginPolicy:
    """Who may log in through POST /user/authenticate."""

    admin_only: bool = True


class AuthService:
    """Issues tokens for verified credentials. Holds no state beyond its collaborators."""

    def __init__(self, db: Session, codec: TokenCodec, policy: LoginPolicy | None = None) -> None:
        self.db = db
        self.codec = codec
        self.policy = policy or LoginPolicy()

    def authenticate(self, email: str, password: str) -> AuthResponse:
        """
        Return a token and user summary for valid credentials.

        Raises InvalidCredentials for an unknown email or a wrong password, and
        AccessDenied for a non-admin account while the admin-only policy is on
        (checked before the password).
        """
        if not email or not password:
            raise InvalidCredentials()
        user = get_user_by_email(self.db, email)
        if user is None:
            logger.info("Login rejected: unknown email=%s", normalize_email(email))
            raise InvalidCredentials()
        if self.policy.admin_only and user.role != ROLE_ADMIN:
            logger.info("Login rejected: non-admin user_id=%s", user.id)
            raise AccessDenied()
        if not verify_password(password, user.password_hash):
            logger.info("Login rejected: bad password for user_id=%s", user.id)
            raise InvalidCredentials()

        token = self.codec.issue(user.id, user.role)
        logger.info("Login succeeded: user_id=%s role=%s", user.id, user.role)
        return AuthResponse(token=token, user=UserSummary.model_validate(user))

    def signup(self, name: str, email: str, password: str, role: str | None = None) -> User:
        """Create an account. Raises DuplicateEmail if the email is already registered."""
        normalized = normalize_email(email)
        if get_user_by_email(self.db, normalized) is not None:
            logger.info("Signup rejected: duplicate email=%s", normalized)
            raise DuplicateEmail()
        user = User(
            name=name.strip(),
            email=normalized,
            password_hash=hash_password(password),
            role=role or ROLE_USER,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            # A concurrent signup with the same email won the unique-index race.
            self.db.rollback()
            raise DuplicateEmail() from e
        self.db.refresh(user)
        logger.info("Signup: created user_id=%s role=%s", user.id, user.role)
        return user
