"""Authentication with a preexisting Cerberus token."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TextIO

import httpx

from cerberus_client.auth.base import TOKEN_HEADER, TokenSessionAuth, refresh_token
from cerberus_client.errors import CerberusRequestError, ConfigurationError

logger = logging.getLogger(__name__)


class TokenAuth(TokenSessionAuth):
    """Uses a token obtained elsewhere.

    The token is not checked on creation. It stays valid until ``logout``
    is called, since its lease is unknown to the client.
    """

    def __init__(self, cerberus_url: str, token: str, http_client: httpx.Client | None = None):
        if not cerberus_url:
            raise ConfigurationError("Cerberus URL cannot be empty")
        if not token:
            raise ConfigurationError("Token cannot be empty")
        super().__init__(cerberus_url, http_client)
        self._headers["Accept"] = "application/json"
        self._token = token
        self._headers[TOKEN_HEADER] = token

    def get_token(self, otp_source: TextIO | None = None) -> str:
        """Return the token. ``otp_source`` is accepted for interface compatibility."""
        self.ensure_authenticated()
        return self._token

    def is_authenticated(self) -> bool:
        return bool(self._token)

    def refresh(self) -> None:
        self.ensure_authenticated()
        response = refresh_token(self.base_url, self._headers, self._http)
        client_token = response.data.client_token
        if client_token is None:
            raise CerberusRequestError("Cerberus did not return a refreshed token")
        self._token = client_token.client_token
        self._headers[TOKEN_HEADER] = client_token.client_token
        logger.debug("Refreshed Cerberus token")

    def get_expiry(self) -> datetime | None:
        self.ensure_authenticated()
        return None
