"""Abstract base class for Cerberus authentication methods."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import TextIO

import httpx

from cerberus_client.api import UserAuthResponse
from cerberus_client.errors import CerberusRequestError, UnauthenticatedError
from cerberus_client.utils import build_url, check_and_parse, new_http_client, validate_url

logger = logging.getLogger(__name__)

# Subtracted from the lease duration to cover request time and clock skew
EXPIRY_DELTA = timedelta(seconds=60)

TOKEN_HEADER = "X-Cerberus-Token"
REFRESH_PATH = "/v2/auth/user/refresh"
LOGOUT_PATH = "/v1/auth"


class Auth(ABC):
    """Abstract interface for authentication methods.

    Implementations must provide:
    - get_token: Return the current token, authenticating if needed
    - is_authenticated: Check for a token that exists and has not expired
    - refresh: Exchange the current token for a new one
    - logout: Revoke the current token
    - get_headers: Headers that authenticate a request
    - get_url: The Cerberus base URL
    - get_expiry: When the current token expires
    """

    @abstractmethod
    def get_token(self, otp_source: TextIO | None = None) -> str:
        """Return an existing token or perform the steps needed to get one.

        Args:
            otp_source: Where to read a one-time passcode from if the login
                requires MFA. Only used by user authentication.

        Raises:
            UnauthorizedError: If Cerberus rejects the credentials
            CerberusError: For other authentication failures
        """
        ...

    @abstractmethod
    def is_authenticated(self) -> bool:
        ...

    @abstractmethod
    def refresh(self) -> None:
        """Replace the current valid token with a new one.

        Raises:
            UnauthenticatedError: If there is no valid token
        """
        ...

    @abstractmethod
    def logout(self) -> None:
        """Revoke the current token.

        Raises:
            UnauthenticatedError: If there is no valid token
        """
        ...

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Return JSON request headers carrying the token.

        Raises:
            UnauthenticatedError: If there is no valid token
        """
        ...

    @abstractmethod
    def get_url(self) -> httpx.URL:
        ...

    @abstractmethod
    def get_expiry(self) -> datetime | None:
        """Return when the current token expires, or None if it never does.

        Raises:
            UnauthenticatedError: If no token has been obtained
        """
        ...

    def close(self) -> None:
        """Release connections held by the method. The default holds none."""


def refresh_token(base_url: httpx.URL, headers: dict[str, str], http: httpx.Client) -> UserAuthResponse:
    """Refresh a token against the API.

    All token types can be refreshed through the user refresh endpoint.
    """
    try:
        response = http.get(build_url(base_url, REFRESH_PATH), headers=headers)
    except httpx.HTTPError as e:
        raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e
    return check_and_parse(response)


def logout(base_url: httpx.URL, headers: dict[str, str], http: httpx.Client) -> None:
    """Revoke the token carried in ``headers``."""
    try:
        response = http.delete(build_url(base_url, LOGOUT_PATH), headers=headers)
    except httpx.HTTPError as e:
        raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e
    if response.status_code != httpx.codes.NO_CONTENT:
        raise CerberusRequestError(
            f"Unable to log out. Got HTTP response code {response.status_code}",
            response=response,
        )


class TokenSessionAuth(Auth):
    """Shared token, expiry and header bookkeeping for concrete methods."""

    def __init__(self, cerberus_url: str, http_client: httpx.Client | None = None):
        self.base_url = validate_url(cerberus_url)
        self._http = http_client or new_http_client()
        self._token = ""
        self._expiry: datetime | None = None
        self._headers: dict[str, str] = {"Content-Type": "application/json"}

    def _set_token(self, token: str, lease_duration: int) -> None:
        self._token = token
        self._headers[TOKEN_HEADER] = token
        self._expiry = datetime.now(timezone.utc) + timedelta(seconds=lease_duration) - EXPIRY_DELTA

    def _clear_token(self) -> None:
        self._token = ""
        self._headers.pop(TOKEN_HEADER, None)

    def is_authenticated(self) -> bool:
        return bool(self._token) and self._expiry is not None and datetime.now(timezone.utc) < self._expiry

    def ensure_authenticated(self) -> None:
        if not self.is_authenticated():
            raise UnauthenticatedError()

    def logout(self) -> None:
        self.ensure_authenticated()
        logout(self.base_url, self._headers, self._http)
        self._clear_token()
        logger.debug("Logged out of Cerberus")

    def get_headers(self) -> dict[str, str]:
        self.ensure_authenticated()
        return dict(self._headers)

    def close(self) -> None:
        """Close the HTTP client used for the auth endpoints."""
        self._http.close()

    def get_url(self) -> httpx.URL:
        return self.base_url

    def get_expiry(self) -> datetime | None:
        if not self._token:
            raise UnauthenticatedError("Expiry time not set")
        return self._expiry
