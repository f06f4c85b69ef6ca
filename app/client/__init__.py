"""Client side of Folio: persisted session state, route gating and the API client."""

from app.client.api import ApiError, FolioClient, SessionExpired
from app.client.session import ClientSession, RouteDecision, SessionState, SessionStore

__all__ = [
    "ApiError",
    "ClientSession",
    "FolioClient",
    "RouteDecision",
    "SessionExpired",
    "SessionState",
    "SessionStore",
]
