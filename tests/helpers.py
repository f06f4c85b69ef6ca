"""Shared builders for API and client tests."""

from typing import Any

from fastapi import FastAPI

from app.core.config import Settings
from app.core.security import hash_password
from app.main import create_app
from app.models import Base, User

TEST_SECRET = "test-secret-for-unit-tests"
# Cheap bcrypt cost for seeded users; the API itself hashes with the default cost.
FAST_ROUNDS = 4


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "JWT_SECRET": TEST_SECRET,
        "DATABASE_URL": "sqlite://",
        "APP_ENV": "dev",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_app(**overrides: Any) -> FastAPI:
    """App on a fresh in-memory SQLite database with tables created."""
    app = create_app(make_settings(**overrides))
    Base.metadata.create_all(bind=app.state.engine)
    return app


def add_user(app: FastAPI, email: str, password: str, role: str = "user", name: str = "Test User") -> int:
    db = app.state.session_factory()
    try:
        user = User(
            name=name,
            email=email.lower(),
            password_hash=hash_password(password, rounds=FAST_ROUNDS),
            role=role,
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_for(app: FastAPI, user_id: int, role: str) -> str:
    return app.state.token_codec.issue(user_id, role)
