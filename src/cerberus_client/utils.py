"""Helpers shared by the client and the authentication methods."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from cerberus_client.api import CLIENT_HEADER, ErrorResponse, UserAuthResponse
from cerberus_client.errors import (
    APIError,
    CerberusError,
    CerberusRequestError,
    ErrorBodyNotReturnedError,
    InvalidURLError,
    UnauthorizedError,
)

DEFAULT_TIMEOUT = 10.0


def validate_url(full_url: str) -> httpx.URL:
    """Validate a Cerberus base URL.

    The URL must have a scheme and host, and no path or query string.

    Raises:
        InvalidURLError: If the URL is empty or malformed
    """
    if not full_url:
        raise InvalidURLError("Cerberus URL cannot be empty")
    try:
        parsed = urlsplit(full_url)
    except ValueError as e:
        raise InvalidURLError(f"Invalid Cerberus URL: {e}") from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidURLError(f"Given URL is missing a scheme or host: {full_url}")
    if parsed.path not in ("", "/"):
        raise InvalidURLError(
            f"Given URL contained a path: {parsed.path}. The URL should not have a path"
        )
    if parsed.query:
        raise InvalidURLError(
            f"Given URL contained a query string: {parsed.query}. "
            "The URL should not have a query string"
        )
    return httpx.URL(f"{parsed.scheme}://{parsed.netloc}")


def build_url(base_url: httpx.URL, path: str, params: Mapping[str, str] | None = None) -> httpx.URL:
    """Join a path and query parameters onto the base URL."""
    if not path.startswith("/"):
        path = "/" + path
    url = base_url.copy_with(path=path)
    if params:
        url = url.copy_merge_params(dict(params))
    return url


def new_http_client(
    default_headers: Mapping[str, str] | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an HTTP client that sends the default headers on every request.

    The ``X-Cerberus-Client`` header is added unless the caller set one.
    """
    headers = httpx.Headers(default_headers or {})
    headers.setdefault("X-Cerberus-Client", CLIENT_HEADER)
    return httpx.Client(headers=headers, timeout=timeout, verify=verify, transport=transport)


def check_and_parse(response: httpx.Response) -> UserAuthResponse:
    """Check an auth or refresh response and parse it.

    Raises:
        UnauthorizedError: On 401 or 403
        CerberusRequestError: On any other non-200 status or an unparsable body
    """
    if response.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
        raise UnauthorizedError()
    if response.status_code != httpx.codes.OK:
        raise CerberusRequestError(
            f"Error while trying to authenticate. Got HTTP response code {response.status_code}",
            response=response,
        )
    try:
        return UserAuthResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise CerberusRequestError(
            f"Error while trying to parse response from Cerberus: {e}", response=response
        ) from e


def parse_api_error(response: httpx.Response) -> CerberusError:
    """Decode the error envelope of a non-success response.

    Returns an ``APIError`` when the body carries an error ID,
    ``ErrorBodyNotReturnedError`` when it is empty or has no error ID, and a
    ``CerberusRequestError`` when the body is not a JSON error document.
    """
    if not response.content.strip():
        return ErrorBodyNotReturnedError()
    try:
        envelope = ErrorResponse.model_validate_json(response.content)
    except ValidationError as e:
        return CerberusRequestError(
            f"Error while parsing API error response: {e}", response=response
        )
    # Any JSON object parses, so an envelope without an ID is not an API error
    if not envelope.error_id:
        return ErrorBodyNotReturnedError()
    return APIError(envelope.error_id, envelope.errors)
