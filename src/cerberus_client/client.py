"""Main client for interacting with Cerberus."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TextIO

import httpx
import hvac
from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_delay,
    wait_exponential,
)

from cerberus_client.auth import Auth, auth_from_settings
from cerberus_client.config import CerberusSettings
from cerberus_client.errors import CerberusError, CerberusRequestError, TokenRefreshError
from cerberus_client.resources import SDB, Category, Metadata, Role, Secret, SecureFile
from cerberus_client.utils import build_url, new_http_client

logger = logging.getLogger(__name__)

REFRESH_HEADER = "X-Refresh-Token"


def _is_server_error(response: httpx.Response) -> bool:
    return response.is_server_error


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Returns the final 5xx response, or re-raises the final transport error
    return retry_state.outcome.result()


def _close_retried_response(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is not None and not outcome.failed:
        outcome.result().close()


class CerberusClient:
    """Client for the Cerberus API.

    The token is obtained on creation, so a failed login raises here.

    Args:
        auth: Authentication method
        otp_source: Text stream holding an MFA passcode line, for user
            authentication that needs one. The terminal is used when None.
        default_headers: Headers sent with every request
        settings: Timeouts and backoff configuration
        transport: Optional httpx transport, mainly for testing
    """

    def __init__(
        self,
        auth: Auth,
        otp_source: TextIO | None = None,
        *,
        default_headers: Mapping[str, str] | None = None,
        settings: CerberusSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or CerberusSettings()
        token = auth.get_token(otp_source)
        self.auth = auth
        self.cerberus_url = auth.get_url()
        self._http = new_http_client(
            default_headers,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            transport=transport,
        )
        self._vault = hvac.Client(
            url=str(self.cerberus_url).rstrip("/"),
            token=token,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def __enter__(self) -> CerberusClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connections."""
        self._http.close()
        self._vault.adapter.close()
        self.auth.close()

    def sdb(self) -> SDB:
        return SDB(self)

    def secret(self) -> Secret:
        return Secret(self._vault)

    def role(self) -> Role:
        return Role(self)

    def category(self) -> Category:
        return Category(self)

    def metadata(self) -> Metadata:
        return Metadata(self)

    def secure_file(self) -> SecureFile:
        return SecureFile(self)

    def do_request(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        data: Any = None,
        *,
        stream: bool = False,
    ) -> httpx.Response:
        """Perform a request, sending ``data`` as JSON when given.

        This is what the resource clients call and is exposed for advanced usage.
        """
        if data is None:
            return self.do_request_with_body(method, path, params, stream=stream)
        return self.do_request_with_body(
            method,
            path,
            params,
            content_type="application/json",
            json=data,
            stream=stream,
        )

    def do_request_with_body(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        content_type: str | None = None,
        body: bytes | None = None,
        *,
        json: Any = None,
        files: Mapping[str, Any] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        """Perform a request with a prebuilt body.

        Transport errors and 5xx responses are retried with exponential
        backoff until the elapsed time ceiling. Other statuses are returned
        to the caller. If the response asks for a token refresh, the token
        is refreshed before returning.

        Args:
            method: HTTP method
            path: Path relative to the Cerberus URL
            params: Query parameters
            content_type: Content type of ``body``
            body: Raw request body
            json: Object to send as JSON instead of ``body``
            files: Multipart files, encoded by httpx with its own content type
            stream: Leave the response body unread. The caller must close it.

        Raises:
            UnauthenticatedError: If the auth method has no valid token
            CerberusRequestError: If the request could not be sent
            TokenRefreshError: If the server asked for a refresh and it failed
        """
        headers = httpx.Headers(self.auth.get_headers())
        if files is not None:
            headers.pop("Content-Type", None)
        elif content_type:
            headers["Content-Type"] = content_type

        request = self._http.build_request(
            method,
            build_url(self.cerberus_url, path, params),
            headers=headers,
            content=body,
            json=json,
            files=files,
        )
        try:
            response = self._retrier()(self._http.send, request, stream=stream)
        except httpx.HTTPError as e:
            logger.info("An error was thrown when executing a call to Cerberus: %s", e)
            raise CerberusRequestError(f"Problem while performing request to Cerberus: {e}") from e

        if not response.is_success:
            logger.info(
                "Cerberus returned an error when executing a call. status code: %d",
                response.status_code,
            )

        if response.headers.get(REFRESH_HEADER) == "true":
            self._refresh_token(response)
        return response

    def _refresh_token(self, response: httpx.Response) -> None:
        try:
            self.auth.refresh()
        except CerberusError as e:
            response.close()
            raise TokenRefreshError(f"Error refreshing token: {e}", response=response) from e
        # The secret store client authenticates with the same token
        self._vault.token = self.auth.get_token()
        logger.debug("Refreshed token after server request")

    def _retrier(self) -> Retrying:
        s = self.settings
        return Retrying(
            wait=wait_exponential(
                multiplier=s.backoff_initial_interval,
                exp_base=s.backoff_multiplier,
                max=s.backoff_max_interval,
            ),
            stop=stop_after_delay(s.backoff_max_elapsed),
            retry=retry_if_exception_type(httpx.TransportError) | retry_if_result(_is_server_error),
            retry_error_callback=_last_outcome,
            before_sleep=self._before_retry,
        )

    @staticmethod
    def _before_retry(retry_state: RetryCallState) -> None:
        _close_retried_response(retry_state)
        before_sleep_log(logger, logging.DEBUG)(retry_state)


def client_from_settings(
    settings: CerberusSettings | None = None,
    otp_source: TextIO | None = None,
    **kwargs,
) -> CerberusClient:
    """Create an authenticated client from settings or ``CERBERUS_*`` variables."""
    settings = settings or CerberusSettings()
    return CerberusClient(auth_from_settings(settings), otp_source, settings=settings, **kwargs)
