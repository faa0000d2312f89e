"""Python client for the Cerberus secrets management service.

cerberus_client helps you:
- Authenticate with a token, a username and password (with MFA), AWS STS or an IAM principal
- Manage safe deposit boxes, roles, categories and metadata
- Upload and download secure files
- Read and write secrets in the Vault-compatible secret store
"""

__version__ = "3.0.0"

from cerberus_client.auth import AuthMethod, IAMAuth, STSAuth, TokenAuth, UserAuth, get_auth
from cerberus_client.client import CerberusClient, client_from_settings
from cerberus_client.config import CerberusSettings
from cerberus_client.errors import (
    APIError,
    CerberusError,
    CerberusRequestError,
    ConfigurationError,
    ErrorBodyNotReturnedError,
    InvalidURLError,
    NotFoundError,
    SafeDepositBoxNotFoundError,
    SecureFileNotFoundError,
    TokenRefreshError,
    UnauthenticatedError,
    UnauthorizedError,
)

__all__ = [
    "APIError",
    "AuthMethod",
    "CerberusClient",
    "CerberusError",
    "CerberusRequestError",
    "CerberusSettings",
    "ConfigurationError",
    "ErrorBodyNotReturnedError",
    "IAMAuth",
    "InvalidURLError",
    "NotFoundError",
    "STSAuth",
    "SafeDepositBoxNotFoundError",
    "SecureFileNotFoundError",
    "TokenAuth",
    "TokenRefreshError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "UserAuth",
    "__version__",
    "client_from_settings",
    "get_auth",
]
