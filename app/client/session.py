"""Client session state: persisted token + user, and view gating for the client."""

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = Path("~/.folio/session.json")

LOGIN_VIEW = "/login"
DEFAULT_AUTHENTICATED_VIEW = "/browse-projects"

LOGIN_REQUIRED_NOTICE = "Please login to continue"
ADMIN_ONLY_NOTICE = "Access denied. Admin only."


class SessionState(str, Enum):
    ANONYMOUS = "Anonymous"
    AUTHENTICATED = "Authenticated"


@dataclass(frozen=True)
class View:
    path: str
    requires_auth: bool = False
    admin_only: bool = False


VIEWS: dict[str, View] = {
    v.path: v
    for v in (
        View("/login"),
        View("/signup"),
        View("/", requires_auth=True),
        View("/browse-projects", requires_auth=True),
        View("/categories", requires_auth=True),
        View("/category/:category", requires_auth=True),
        View("/view-project/:id", requires_auth=True),
        View("/add-project", requires_auth=True, admin_only=True),
        View("/manage-projects", requires_auth=True, admin_only=True),
        View("/update-project/:id", requires_auth=True, admin_only=True),
    )
}


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of a navigation: the path to render and an optional notice to show."""

    path: str
    allowed: bool
    notice: str | None = None


def match_view(path: str) -> View | None:
    """Find the view for a concrete path; ':name' segments match any single segment."""
    parts = path.rstrip("/").split("/") if path != "/" else [""]
    for view in VIEWS.values():
        pattern = view.path.rstrip("/").split("/") if view.path != "/" else [""]
        if len(pattern) != len(parts):
            continue
        if all((p.startswith(":") and bool(s)) or p == s for p, s in zip(pattern, parts)):
            return view
    return None


class SessionStore:
    """
    JSON file holding ``token`` and ``user``. Both keys are written and removed
    together; a missing or unreadable file means no session.
    """

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_SESSION_FILE) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> tuple[str | None, dict[str, Any] | None]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None, None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None, None
        token = data.get("token") if isinstance(data, dict) else None
        user = data.get("user") if isinstance(data, dict) else None
        if not token or not isinstance(user, dict):
            return None, None
        return token, user

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")
        os.chmod(tmp, 0o600)
        tmp.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class ClientSession:
    """
    Anonymous/Authenticated state machine over a SessionStore.

    Gating here only decides where to navigate; the server re-checks every request.
    Token expiry is not checked locally: a 401 from the API triggers logout().
    """

    def __init__(self, store: SessionStore) -> None:
        self.store = store
        self.token, self.user = store.load()

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.token else SessionState.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"

    def login(self, token: str, user: dict[str, Any]) -> None:
        """Anonymous -> Authenticated after a successful authenticate call."""
        self.store.save(token, user)
        self.token, self.user = token, user
        logger.info("Session started for user_id=%s", user.get("id"))

    def logout(self) -> None:
        """Authenticated -> Anonymous; clears token and user together."""
        self.store.clear()
        self.token, self.user = None, None
        logger.info("Session cleared")

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def navigate(self, path: str) -> RouteDecision:
        view = match_view(path)
        if view is None or not view.requires_auth:
            return RouteDecision(path=path, allowed=True)
        if self.state is SessionState.ANONYMOUS:
            return RouteDecision(path=LOGIN_VIEW, allowed=False, notice=LOGIN_REQUIRED_NOTICE)
        if view.admin_only and not self.is_admin:
            return RouteDecision(
                path=DEFAULT_AUTHENTICATED_VIEW, allowed=False, notice=ADMIN_ONLY_NOTICE
            )
        return RouteDecision(path=path, allowed=True)
