"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user root@example.com 'your-secure-password' Root admin
"""
import argparse
import logging
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import DuplicateEmail
from app.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    ROLES,
    TokenCodec,
)
from app.services.auth import AuthService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Folio user account.")
    parser.add_argument("email", help="Account email (stored lower-cased)")
    parser.add_argument(
        "password",
        help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars, at most {PASSWORD_MAX_BYTES} bytes)",
    )
    parser.add_argument("name", help="Display name")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    # Same rules as POST /user/signup, so the account can log in afterwards.
    try:
        email = _email_adapter.validate_python(args.email.strip())
    except ValidationError:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if len(args.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        print(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.", file=sys.stderr)
        return 1
    name = args.name.strip()
    if not name:
        print("Name must not be blank.", file=sys.stderr)
        return 1

    settings = get_settings()
    session_factory = create_session_factory(create_db_engine(settings.DATABASE_URL))
    db = session_factory()
    try:
        service = AuthService(db, TokenCodec.from_settings(settings))
        user = service.signup(name, email, args.password, args.role)
        logger.info("Created user '%s' (id=%s) with role '%s'.", user.email, user.id, user.role)
        return 0
    except DuplicateEmail:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
