"""Core app configuration, database and security."""

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import TokenCodec

__all__ = ["Settings", "get_settings", "get_db", "TokenCodec"]
