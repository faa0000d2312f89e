"""Username and password authentication, with MFA support."""

from __future__ import annotations

import logging
import os
from typing import TextIO

import httpx
from rich.console import Console

from cerberus_client.api import AuthStatus, UserAuthResponse
from cerberus_client.auth.base import TokenSessionAuth, refresh_token
from cerberus_client.errors import CerberusRequestError, ConfigurationError
from cerberus_client.utils import build_url, check_and_parse

logger = logging.getLogger(__name__)

USER_AUTH_PATH = "/v2/auth/user"
MFA_CHECK_PATH = "/v2/auth/mfa_check"
OTP_PROMPT = "Enter token from device: "


class UserAuth(TokenSessionAuth):
    """Authenticates with a username and password.

    If the ``CERBERUS_URL`` environment variable is set, it is used instead
    of the URL passed in.
    """

    def __init__(
        self,
        cerberus_url: str,
        username: str,
        password: str,
        http_client: httpx.Client | None = None,
        console: Console | None = None,
    ):
        cerberus_url = os.environ.get("CERBERUS_URL") or cerberus_url
        if not username:
            raise ConfigurationError("Username cannot be empty")
        if not password:
            raise ConfigurationError("Password cannot be empty")
        if not cerberus_url:
            raise ConfigurationError("Cerberus URL cannot be empty")
        super().__init__(cerberus_url, http_client)
        self.username = username
        self._password = password
        self._console = console

    def get_token(self, otp_source: TextIO | None = None) -> str:
        """Return the current token, logging in first if there is none.

        Args:
            otp_source: Text stream to read the MFA passcode line from. When
                None and MFA is required, the user is prompted on the terminal.
        """
        if self.is_authenticated():
            return self._token
        self._authenticate(otp_source)
        return self._token

    def refresh(self) -> None:
        self.ensure_authenticated()
        self._store(refresh_token(self.base_url, self._headers, self._http))
        logger.debug("Refreshed Cerberus token for %s", self.username)

    def _authenticate(self, otp_source: TextIO | None) -> None:
        try:
            response = self._http.get(
                build_url(self.base_url, USER_AUTH_PATH),
                auth=(self.username, self._password),
            )
        except httpx.HTTPError as e:
            raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e
        parsed = check_and_parse(response)
        if parsed.status == AuthStatus.MFA_REQUIRED:
            # TODO: let the caller pick the device instead of always using the first one
            if not parsed.data.devices:
                raise CerberusRequestError("MFA is required but no devices are enrolled")
            self._do_mfa(parsed.data.state_token, parsed.data.devices[0].id, otp_source)
            return
        self._store(parsed)

    def _do_mfa(self, state_token: str, device_id: str, otp_source: TextIO | None) -> None:
        body = {
            "device_id": device_id,
            "state_token": state_token,
            "otp_token": self._read_otp(otp_source),
        }
        try:
            response = self._http.post(build_url(self.base_url, MFA_CHECK_PATH), json=body)
        except httpx.HTTPError as e:
            raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e
        self._store(check_and_parse(response))

    def _read_otp(self, otp_source: TextIO | None) -> str:
        if otp_source is None:
            console = self._console or Console()
            return console.input(OTP_PROMPT).strip()
        return otp_source.readline().strip()

    def _store(self, response: UserAuthResponse) -> None:
        client_token = response.data.client_token
        if client_token is None:
            raise CerberusRequestError("Cerberus did not return a client token")
        self._set_token(client_token.client_token, client_token.lease_duration)
