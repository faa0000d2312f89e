"""Exceptions raised by the Cerberus client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from cerberus_client.api import ErrorDetail


class CerberusError(Exception):
    """Base exception for Cerberus client operations."""

    pass


class UnauthenticatedError(CerberusError):
    """No valid token is available. Authenticate before calling this operation."""

    def __init__(self, message: str = "Not authenticated. Please authenticate and try again"):
        super().__init__(message)


class UnauthorizedError(CerberusError):
    """Cerberus rejected the supplied credentials."""

    def __init__(self, message: str = "Invalid login credentials. Please try again"):
        super().__init__(message)


class NotFoundError(CerberusError):
    """Requested resource does not exist."""

    pass


class SafeDepositBoxNotFoundError(NotFoundError):
    """Safe deposit box does not exist or is not visible to the caller."""

    def __init__(self, message: str = "Unable to find Safe Deposit Box"):
        super().__init__(message)


class SecureFileNotFoundError(NotFoundError):
    """Secure file does not exist."""

    pass


class InvalidURLError(CerberusError):
    """Cerberus URL is malformed or carries a path or query string."""

    pass


class ConfigurationError(CerberusError):
    """Client or authentication method is misconfigured."""

    pass


class CerberusRequestError(CerberusError):
    """Request failed in transport or returned an unexpected status.

    ``response`` is set when the server answered.
    """

    def __init__(self, message: str, response: httpx.Response | None = None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None


class TokenRefreshError(CerberusRequestError):
    """Server asked for a token refresh and the refresh failed.

    ``response`` holds the original response of the request that carried
    the refresh signal.
    """

    pass


class ErrorBodyNotReturnedError(CerberusError):
    """Non-success response carried no error envelope, usually a server fault."""

    def __init__(self, message: str = "No error body returned from server"):
        super().__init__(message)


class APIError(CerberusError):
    """Structured error envelope returned by the Cerberus API."""

    def __init__(self, error_id: str, errors: list[ErrorDetail] | None = None):
        self.error_id = error_id
        self.errors = list(errors or [])
        super().__init__(self._format())

    def _format(self) -> str:
        lines = [f"Error from API. ID: {self.error_id}"]
        for detail in self.errors:
            line = f"  {detail.code}: {detail.message}"
            if detail.metadata:
                line += f" {detail.metadata}"
            lines.append(line)
        return "\n".join(lines)
