"""HTTP client for the NoteTaking API."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

import requests

logger = logging.getLogger(__name__)

RESEND_COOLDOWN_SECONDS = 60


class ApiError(Exception):
    """Non-2xx response carrying the server's message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SessionExpired(ApiError):
    """The server rejected the stored token; the session has been cleared."""


class ResendCooldownActive(Exception):
    """A code was requested too recently to ask for another."""

    def __init__(self, remaining: float):
        self.remaining = remaining
        super().__init__(f"Wait {remaining:.0f} seconds before requesting another code")


class TokenStore:
    """
    Keeps the bearer token and public profile between runs.

    With no path the session lives only in memory.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[dict[str, Any]] = None
        self._load()

    def _load(self) -> None:
        if self.path and self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self.token = data.get("token")
            self.user = data.get("user")

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.token = token
        self.user = user
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()


class NoteTakingClient:
    """
    Client for the auth and notes endpoints.

    ``session`` may be a ``requests.Session`` or anything with a compatible
    ``request(method, url, json=..., headers=...)`` method.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        store: Optional[TokenStore] = None,
        session: Optional[Any] = None,
        timeout: float = 10.0,
        resend_cooldown: float = RESEND_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = base_url.rstrip("/")
        self.store = store or TokenStore()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.resend_cooldown = resend_cooldown
        self._clock = clock
        self._last_otp_request: Optional[float] = None

    @property
    def is_authenticated(self) -> bool:
        return self.store.token is not None

    # Auth

    def send_otp(self, email: str, name: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/send-otp", body={"email": email, "name": name})
        self._last_otp_request = self._clock()
        return data

    def resend_otp(self, email: str, name: str) -> dict[str, Any]:
        """Request a new code, honouring the cooldown since the last request."""
        if self._last_otp_request is not None:
            elapsed = self._clock() - self._last_otp_request
            if elapsed < self.resend_cooldown:
                raise ResendCooldownActive(self.resend_cooldown - elapsed)
        return self.send_otp(email, name)

    def verify_otp(self, email: str, otp: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/verify-otp", body={"email": email, "otp": otp, "password": password}
        )
        return self._remember(data)

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/login", body={"email": email, "password": password})
        return self._remember(data)

    def google_login(self, credential: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/google", body={"credential": credential})
        return self._remember(data)

    def current_user(self) -> dict[str, Any]:
        return self._request("GET", "/auth/curruser", auth=True)["user"]

    def logout(self) -> None:
        """Discard the session locally; tokens are not revoked server-side."""
        self.store.clear()

    # Notes

    def list_notes(self) -> list[dict[str, Any]]:
        return self._request("GET", "/notes", auth=True)["notes"]

    def get_note(self, note_id: str) -> dict[str, Any]:
        return self._request("GET", f"/notes/{note_id}", auth=True)["note"]

    def create_note(self, title: str, content: str) -> dict[str, Any]:
        return self._request(
            "POST", "/notes", body={"title": title, "content": content}, auth=True
        )["note"]

    def update_note(self, note_id: str, title: str, content: str) -> dict[str, Any]:
        return self._request(
            "PUT", f"/notes/{note_id}", body={"title": title, "content": content}, auth=True
        )["note"]

    def delete_note(self, note_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/notes/{note_id}", auth=True)

    # Transport

    def _remember(self, data: dict[str, Any]) -> dict[str, Any]:
        self.store.save(data["token"], data["user"])
        return data

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        auth: bool = False,
    ) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if auth and self.store.token:
            headers["Authorization"] = f"Bearer {self.store.token}"

        kwargs: dict[str, Any] = {"headers": headers}
        if body is not None:
            kwargs["json"] = body
        if isinstance(self.session, requests.Session):
            kwargs["timeout"] = self.timeout

        response = self.session.request(method, f"{self.base_url}{path}", **kwargs)

        if response.status_code == 401:
            logger.info("Server rejected the session token, clearing it")
            self.store.clear()
            raise SessionExpired(401, self._message(response, "Unauthorized"))

        if response.status_code >= 400:
            raise ApiError(response.status_code, self._message(response, "Request failed"))

        return response.json()

    @staticmethod
    def _message(response: Any, default: str) -> str:
        try:
            return response.json().get("message", default)
        except ValueError:
            return default
