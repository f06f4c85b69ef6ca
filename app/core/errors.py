"""Authentication and authorization errors.

Each error carries the HTTP status it maps to and a stable ``code`` that clients
can switch on. The API layer renders them as ``{"detail": ..., "code": ...}``.
"""


class AuthError(Exception):
    """Base class for credential, token and role failures."""

    status_code: int = 401
    code: str = "AuthError"
    default_message: str = "Authentication failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    code = "InvalidCredentials"
    default_message = "Invalid email or password."


class AccessDenied(AuthError):
    """A non-admin account tried the admin-only login path."""

    status_code = 403
    code = "AccessDenied"
    default_message = "Access denied. Admin only."


class DuplicateEmail(AuthError):
    status_code = 400
    code = "DuplicateEmail"
    default_message = "User already exists."


class Unauthenticated(AuthError):
    code = "Unauthenticated"
    default_message = "Not authenticated."


class TokenInvalid(AuthError):
    code = "TokenInvalid"
    default_message = "Invalid token."


class TokenExpired(AuthError):
    code = "TokenExpired"
    default_message = "Token has expired."


class Forbidden(AuthError):
    status_code = 403
    code = "Forbidden"
    default_message = "Admin access required."
