"""Password hashing and JWT issuance/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.errors import TokenExpired, TokenInvalid

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128
# bcrypt only looks at the first 72 bytes; longer passwords are rejected, not truncated.
PASSWORD_MAX_BYTES = 72

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

REQUIRED_CLAIMS = ("sub", "userId", "role", "iat", "exp")


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Raises ValueError past PASSWORD_MAX_BYTES."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Over-long passwords never match."""
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, validated token content."""

    user_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """
    Signs and verifies access tokens with a server-held secret.

    Built once per application (see app.main.create_app) and read-only afterwards;
    validity is derived from the token alone, no server-side session is kept.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", lifetime: timedelta = timedelta(hours=24)) -> None:
        if not secret or not secret.strip():
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenCodec":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )

    def issue(self, user_id: int, role: str, now: datetime | None = None) -> str:
        """Create a signed token carrying sub/userId, role, iat and exp."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "userId": user_id,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.
        Raises TokenExpired once exp has passed, TokenInvalid for anything else.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except jwt.PyJWTError as e:
            raise TokenInvalid() from e

        user_id = payload.get("userId")
        role = payload.get("role")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or str(user_id) != payload.get("sub"):
            raise TokenInvalid("Invalid token payload.")
        if role not in ROLES:
            raise TokenInvalid("Invalid token payload.")
        return TokenClaims(
            user_id=user_id,
            role=role,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
