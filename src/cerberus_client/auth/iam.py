"""AWS IAM principal authentication."""

from __future__ import annotations

import logging
import os
from typing import TextIO

import httpx
from pydantic import ValidationError

from cerberus_client.api import IAMAuthResponse
from cerberus_client.auth.base import TokenSessionAuth, refresh_token
from cerberus_client.errors import CerberusRequestError, ConfigurationError, UnauthorizedError
from cerberus_client.utils import build_url

logger = logging.getLogger(__name__)

IAM_AUTH_PATH = "/v2/auth/iam-principal"


class IAMAuth(TokenSessionAuth):
    """Authenticates as an IAM principal ARN in a region.

    Cerberus trusts the ARN it is given, so this method only works where the
    server allows it. If the ``CERBERUS_URL`` environment variable is set, it
    is used instead of the URL passed in.
    """

    def __init__(
        self,
        cerberus_url: str,
        role_arn: str,
        region: str,
        http_client: httpx.Client | None = None,
    ):
        cerberus_url = os.environ.get("CERBERUS_URL") or cerberus_url
        if not role_arn:
            raise ConfigurationError("Role ARN cannot be empty")
        if not region:
            raise ConfigurationError("Region cannot be empty")
        if not cerberus_url:
            raise ConfigurationError("Cerberus URL cannot be empty")
        super().__init__(cerberus_url, http_client)
        self.role_arn = role_arn
        self.region = region

    def get_token(self, otp_source: TextIO | None = None) -> str:
        """Return the current token, authenticating first if there is none."""
        if not self.is_authenticated():
            self._authenticate()
        return self._token

    def refresh(self) -> None:
        self.ensure_authenticated()
        client_token = refresh_token(self.base_url, self._headers, self._http).data.client_token
        if client_token is None:
            raise CerberusRequestError("Cerberus did not return a refreshed token")
        self._set_token(client_token.client_token, client_token.lease_duration)
        logger.debug("Refreshed Cerberus token for %s", self.role_arn)

    def _authenticate(self) -> None:
        body = {"iam_principal_arn": self.role_arn, "region": self.region}
        try:
            response = self._http.post(build_url(self.base_url, IAM_AUTH_PATH), json=body)
        except httpx.HTTPError as e:
            raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e

        if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise UnauthorizedError()
        if response.status_code != httpx.codes.OK:
            raise CerberusRequestError(
                f"Error while trying to authenticate. Got HTTP response code {response.status_code}",
                response=response,
            )
        try:
            parsed = IAMAuthResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise CerberusRequestError(
                f"Error while trying to parse response from Cerberus: {e}", response=response
            ) from e

        logger.info("Successfully authenticated with Cerberus as %s", self.role_arn)
        self._set_token(parsed.client_token, parsed.lease_duration)
