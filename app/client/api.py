"""HTTP client for the Folio API that keeps a ClientSession in sync with server responses."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from app.client.session import ClientSession

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_TIMEOUT_SEC = 15.0


class ApiError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, message: str, status_code: int, code: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class SessionExpired(ApiError):
    """A protected call returned 401; the local session has been cleared."""


def _error_from_response(resp: httpx.Response) -> ApiError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    detail = body.get("detail")
    if isinstance(detail, list):
        # FastAPI validation errors: list of {loc, msg, type}
        message = "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict))
    else:
        message = str(detail or f"Request failed with status {resp.status_code}")
    return ApiError(message, resp.status_code, body.get("code"))


class FolioClient:
    """
    Thin wrapper over httpx.Client.

    Protected calls attach the session's bearer token. When one of them comes
    back 401 (missing, invalid or expired token) the session is logged out and
    SessionExpired is raised, so callers land back in the Anonymous state.
    """

    def __init__(
        self,
        session: ClientSession,
        base_url: str = DEFAULT_API_URL,
        http: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.session = session
        self._http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> FolioClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _public(self, method: str, url: str, **kwargs: Any) -> Any:
        resp = self._http.request(method, url, **kwargs)
        if resp.status_code >= 400:
            raise _error_from_response(resp)
        return resp.json()

    def _protected(self, method: str, url: str, **kwargs: Any) -> Any:
        resp = self._http.request(method, url, headers=self.session.auth_headers(), **kwargs)
        if resp.status_code == 401:
            err = _error_from_response(resp)
            self.session.logout()
            raise SessionExpired(err.message, err.status_code, err.code)
        if resp.status_code >= 400:
            raise _error_from_response(resp)
        return resp.json()

    # Auth

    def authenticate(self, email: str, password: str) -> dict[str, Any]:
        """Log in; on success the token and user summary are persisted."""
        data = self._public("POST", "/user/authenticate", json={"email": email, "password": password})
        self.session.login(data["token"], data["user"])
        return data["user"]

    def signup(self, name: str, email: str, password: str, role: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"name": name, "email": email, "password": password}
        if role:
            body["role"] = role
        return self._public("POST", "/user/signup", json=body)

    def logout(self) -> None:
        self.session.logout()

    def whoami(self) -> dict[str, Any]:
        return self._protected("GET", "/user/me")

    # Projects

    def list_projects(self, search: str | None = None, types: Sequence[str] = ()) -> list[dict[str, Any]]:
        params: list[tuple[str, str]] = [("type", t) for t in types]
        if search:
            params.append(("search", search))
        return self._protected("GET", "/project/getall", params=params)

    def categories(self) -> list[dict[str, Any]]:
        return self._protected("GET", "/project/categories")

    def get_project(self, project_id: int) -> dict[str, Any]:
        return self._protected("GET", f"/project/get/{project_id}")

    def add_project(self, project: dict[str, Any]) -> dict[str, Any]:
        return self._protected("POST", "/project/add", json=project)["project"]

    def update_project(self, project_id: int, project: dict[str, Any]) -> dict[str, Any]:
        return self._protected("PUT", f"/project/update/{project_id}", json=project)["project"]

    def update_description(self, project_id: int, description: str) -> dict[str, Any]:
        return self._protected(
            "PATCH", f"/project/update/{project_id}", json={"description": description}
        )["project"]

    def delete_project(self, project_id: int) -> dict[str, Any]:
        return self._protected("DELETE", f"/project/delete/{project_id}")["project"]
