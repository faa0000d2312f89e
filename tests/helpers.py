"""Test doubles shared across the test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TextIO

import httpx

from cerberus_client.auth import Auth
from cerberus_client.errors import CerberusError
from cerberus_client.utils import validate_url

BASE_URL = "http://cerberus.test"
TOKEN = "a-cool-token"
REFRESHED_TOKEN = "a refreshed token"

ERROR_RESPONSE = """{
    "error_id": "a041aa4d-1d5a-4eed-8e8a-6dc18bdf96db",
    "errors": [{
        "code": 99208,
        "message": "The name may not be blank.",
        "metadata": {
            "field": "name"
        }
    }]
}"""


class MockAuth(Auth):
    """Auth method with a fixed token that never talks to a server."""

    def __init__(
        self,
        cerberus_url: str = BASE_URL,
        token: str = TOKEN,
        token_error: bool = False,
        refresh_error: bool = False,
    ):
        self.base_url = validate_url(cerberus_url)
        self.token = token
        self.token_error = token_error
        self.refresh_error = refresh_error
        self.refresh_calls = 0

    def get_token(self, otp_source: TextIO | None = None) -> str:
        if self.token_error:
            raise CerberusError("MockAuth unable to obtain token")
        return self.token

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def refresh(self) -> None:
        self.refresh_calls += 1
        if self.refresh_error:
            raise CerberusError("MockAuth unable to refresh token")
        self.token = REFRESHED_TOKEN

    def logout(self) -> None:
        self.token = ""

    def get_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "X-Cerberus-Token": self.token}

    def get_url(self) -> httpx.URL:
        return self.base_url

    def get_expiry(self) -> datetime | None:
        return datetime.now(timezone.utc)


class MockServer:
    """httpx handler that answers every request the same way and records it."""

    def __init__(
        self,
        status_code: int = 200,
        body: str | bytes = "",
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.body = body
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body, headers=self.headers)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def unreachable(request: httpx.Request) -> httpx.Response:
    """Handler for a server that never answers."""
    raise httpx.ConnectError("Connection refused", request=request)


class Router:
    """httpx handler that answers by method and path, for multi-step exchanges.

    Each route maps to a list of responses served in order; the last one
    repeats once the list is used up.
    """

    def __init__(self, routes: dict[tuple[str, str], list[httpx.Response]]):
        self.routes = {key: list(value) for key, value in routes.items()}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        responses = self.routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404)
        if len(responses) > 1:
            return responses.pop(0)
        return responses[0]

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


def auth_body(token: str = TOKEN, lease_duration: int = 3600) -> dict:
    """JSON body of a successful user login or refresh."""
    return {
        "status": "success",
        "data": {
            "client_token": {
                "client_token": token,
                "policies": ["web", "stage"],
                "metadata": {"username": "john.doe@nike.com", "is_admin": "false"},
                "lease_duration": lease_duration,
                "renewable": True,
            }
        },
    }
