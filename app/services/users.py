"""User management for the admin endpoints: list, fetch, update, delete, count."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateEmail
from app.core.security import hash_password
from app.models import User
from app.schemas.auth import UserUpdateRequest
from app.services.auth import get_user_by_email, normalize_email

logger = logging.getLogger(__name__)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def count_users(db: Session) -> int:
    return db.query(User).count()


def update_user(db: Session, user: User, changes: UserUpdateRequest) -> User:
    """
    Apply the fields set in changes. A new password is re-hashed; a new email
    must not belong to another account (DuplicateEmail).
    """
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in fields:
        email = normalize_email(fields["email"])
        other = get_user_by_email(db, email)
        if other is not None and other.id != user.id:
            raise DuplicateEmail()
        user.email = email
    if "name" in fields:
        user.name = fields["name"].strip()
    if "password" in fields:
        user.password_hash = hash_password(fields["password"])
    if "role" in fields:
        user.role = fields["role"]
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmail() from e
    db.refresh(user)
    logger.info("Updated user_id=%s fields=%s", user.id, sorted(fields))
    return user


def delete_user(db: Session, user: User) -> None:
    """Hard delete. Tokens already issued to the user stay valid until they expire."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info("Deleted user_id=%s", user_id)
