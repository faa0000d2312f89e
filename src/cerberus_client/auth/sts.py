"""AWS STS authentication using SigV4 signed GetCallerIdentity requests."""

from __future__ import annotations

import logging
from typing import TextIO

import boto3
import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from pydantic import ValidationError

from cerberus_client.api import IAMAuthResponse
from cerberus_client.auth.base import TokenSessionAuth
from cerberus_client.errors import CerberusRequestError, ConfigurationError, UnauthorizedError
from cerberus_client.utils import build_url, parse_api_error

logger = logging.getLogger(__name__)

STS_AUTH_PATH = "/v2/auth/sts-identity"
STS_SERVICE = "sts"
STS_BODY = "Action=GetCallerIdentity&Version=2011-06-15"
STS_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
CHINA_REGIONS = frozenset({"cn-north-1", "cn-northwest-1"})


class STSAuth(TokenSessionAuth):
    """Authenticates with the caller's AWS identity.

    Credentials come from the default AWS chain (environment, shared config,
    instance profile and so on).
    """

    def __init__(
        self,
        cerberus_url: str,
        region: str,
        http_client: httpx.Client | None = None,
        session: boto3.session.Session | None = None,
    ):
        if not region:
            raise ConfigurationError("Region cannot be empty")
        if not cerberus_url:
            raise ConfigurationError("Cerberus URL cannot be empty")
        super().__init__(cerberus_url, http_client)
        self.region = region
        self._session = session

    def get_token(self, otp_source: TextIO | None = None) -> str:
        """Return the current token, authenticating first if there is none."""
        if not self.is_authenticated():
            self._authenticate()
        return self._token

    def refresh(self) -> None:
        """Refresh by authenticating again.

        The refresh endpoint caps how many times an AWS token can be
        refreshed, and Cerberus asks for a refresh after every SDB creation,
        so automation would hit the cap.
        """
        self.ensure_authenticated()
        self._authenticate()

    def _authenticate(self) -> None:
        signed_headers = self._sign()
        try:
            response = self._http.post(
                build_url(self.base_url, STS_AUTH_PATH),
                headers=signed_headers,
                content=STS_BODY,
            )
        except httpx.HTTPError as e:
            raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e

        if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise UnauthorizedError(
                "Invalid credentials given. Verify that the role you are currently using is valid "
                "with the AWS CLI ($ aws sts get-caller-identity) or with gimme-aws-creds."
            )
        if response.status_code != httpx.codes.OK:
            raise CerberusRequestError(
                "Error while trying to authenticate. "
                f"Got HTTP response code {response.status_code}\n{parse_api_error(response)}",
                response=response,
            )
        try:
            parsed = IAMAuthResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise CerberusRequestError(
                f"Error while trying to parse response from Cerberus: {e}", response=response
            ) from e

        identity = parsed.metadata.get("iam_principal_arn") or parsed.metadata.get(
            "username", "unknown"
        )
        logger.info("Successfully authenticated with Cerberus as %s", identity)
        self._set_token(parsed.client_token, parsed.lease_duration)

    def sts_endpoint(self) -> str:
        url = f"https://sts.{self.region}.amazonaws.com"
        if self.region in CHINA_REGIONS:
            url += ".cn"
        return url

    def _sign(self) -> dict[str, str]:
        """Sign a GetCallerIdentity request and return its headers."""
        session = self._session or boto3.session.Session()
        self._check_region(session)
        try:
            credentials = session.get_credentials()
        except BotoCoreError as e:
            raise ConfigurationError(f"Unable to load AWS credentials: {e}") from e
        if credentials is None:
            raise ConfigurationError("AWS credentials are required and cannot be found")

        request = AWSRequest(
            method="POST",
            url=self.sts_endpoint(),
            data=STS_BODY,
            headers={"Content-Type": STS_CONTENT_TYPE},
        )
        try:
            SigV4Auth(credentials.get_frozen_credentials(), STS_SERVICE, self.region).add_auth(request)
        except BotoCoreError as e:
            raise ConfigurationError(f"Problem signing request to Cerberus: {e}") from e
        return dict(request.headers.items())

    def _check_region(self, session: boto3.session.Session) -> None:
        regions: set[str] = set()
        for partition in session.get_available_partitions():
            regions.update(session.get_available_regions(STS_SERVICE, partition_name=partition))
        if self.region not in regions:
            raise ConfigurationError(
                "Endpoint could not be created. "
                f"Confirm that region, {self.region}, is a valid AWS region"
            )
