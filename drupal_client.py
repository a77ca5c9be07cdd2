"""Thin client for the Drupal services JSON endpoint (connect/login/file/node)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

import requests

from app_config import DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)

_CONNECT_PATH = "api/system/connect"
_LOGIN_PATH = "api/user/login"
_LOGOUT_PATH = "api/user/logout"
_FILE_PATH = "api/file"
_NODE_PATH = "api/node"


class DrupalApiError(RuntimeError):
    """Raised when the Drupal endpoint cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class DrupalUser:
    """The account a session belongs to; uid 0 is the anonymous user."""

    uid: int
    name: str = ""

    @property
    def is_anonymous(self) -> bool:
        return self.uid == 0


ANONYMOUS_USER = DrupalUser(uid=0, name="")


@dataclass(frozen=True, slots=True)
class DrupalSession:
    """Normalized session returned by connect and login calls."""

    session_id: str
    session_name: str | None
    user: DrupalUser

    @property
    def is_authenticated(self) -> bool:
        return not self.user.is_anonymous

    @property
    def cookie(self) -> str | None:
        if not self.session_name or not self.session_id:
            return None
        return f"{self.session_name}={self.session_id}"


def _coerce_int(raw: Any) -> int:
    try:
        return int(str(raw).strip() or 0)
    except ValueError:
        return 0


def _parse_user(data: Any) -> DrupalUser:
    if not isinstance(data, Mapping):
        return ANONYMOUS_USER
    return DrupalUser(uid=_coerce_int(data.get("uid")), name=str(data.get("name") or ""))


def _parse_session(data: Mapping[str, Any]) -> DrupalSession:
    session_name = data.get("session_name")
    return DrupalSession(
        session_id=str(data.get("sessid") or ""),
        session_name=str(session_name) if session_name else None,
        user=_parse_user(data.get("user")),
    )


def _error_message(response: Any, data: Any) -> str:
    if isinstance(data, list):
        parts = [str(item).strip() for item in data if str(item).strip()]
        if parts:
            return " ".join(parts)
    if isinstance(data, Mapping):
        for key in ("message", "error", "form_errors"):
            value = data.get(key)
            if isinstance(value, Mapping):
                value = " ".join(str(item) for item in value.values())
            if value:
                return str(value)
    if isinstance(data, str) and data.strip():
        return data.strip()
    reason = getattr(response, "reason", None)
    if reason:
        return str(reason)
    return f"Drupal request failed (HTTP {response.status_code})"


class DrupalClient:
    """Issue JSON POST requests against a Drupal services endpoint.

    The client remembers the session credential returned by ``connect`` and
    ``login`` and replays it as a cookie on every following request, which is
    how the services module ties requests to the logged-in account.
    """

    def __init__(self, base_url: str = "", *, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._base_url = ""
        self.base_url = base_url
        self.timeout = timeout
        self.session: DrupalSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        url = (value or "").strip()
        if url and not url.endswith("/"):
            url += "/"
        self._base_url = url

    def _url(self, path: str) -> str:
        if not self._base_url:
            raise DrupalApiError("Drupal base URL is not configured; set it in the options page.")
        return f"{self._base_url}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        cookie = self.session.cookie if self.session else None
        if cookie:
            headers["Cookie"] = cookie
        return headers

    def _post_json(self, path: str, payload: Mapping[str, Any]) -> MutableMapping[str, Any]:
        url = self._url(path)
        try:
            response = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise DrupalApiError(f"Network error contacting Drupal: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            message = _error_message(response, data)
            logger.warning("Drupal %s failed with HTTP %s: %s", path, response.status_code, message)
            raise DrupalApiError(message, status_code=response.status_code)

        if data is None:
            raise DrupalApiError("Invalid response from Drupal (non-JSON body)", status_code=response.status_code)
        if isinstance(data, list):
            # logout answers with a bare list such as [true]
            return {"result": data}
        if not isinstance(data, MutableMapping):
            raise DrupalApiError("Unexpected Drupal response shape", status_code=response.status_code)
        return data

    def connect(self) -> DrupalSession:
        """Open (or resume) a session; anonymous visitors get uid 0."""

        data = self._post_json(_CONNECT_PATH, {})
        session = _parse_session(data)
        if session.session_name is None and self.session is not None:
            session = DrupalSession(session.session_id, self.session.session_name, session.user)
        self.session = session
        return session

    def login(self, name: str, password: str) -> DrupalSession:
        data = self._post_json(_LOGIN_PATH, {"name": name, "pass": password})
        self.session = _parse_session(data)
        return self.session

    def logout(self) -> None:
        try:
            self._post_json(_LOGOUT_PATH, {})
        finally:
            self.session = None

    def create_file(self, *, filename: str, file_data: str, uid: int) -> int:
        """Upload a base64 encoded file and return its fid."""

        payload = {"file": {"filename": filename, "file": file_data, "uid": uid}}
        data = self._post_json(_FILE_PATH, payload)
        fid = _coerce_int(data.get("fid"))
        if not fid:
            raise DrupalApiError("Drupal did not return a file id for the upload")
        return fid

    def create_node(self, node: Mapping[str, Any]) -> int:
        """Create a node and return its nid."""

        data = self._post_json(_NODE_PATH, {"node": dict(node)})
        nid = _coerce_int(data.get("nid"))
        if not nid:
            raise DrupalApiError("Drupal did not return a node id")
        return nid


__all__ = [
    "ANONYMOUS_USER",
    "DrupalApiError",
    "DrupalClient",
    "DrupalSession",
    "DrupalUser",
]
