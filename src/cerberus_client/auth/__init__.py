"""Authentication methods for Cerberus."""

from __future__ import annotations

from enum import Enum

import httpx

from cerberus_client.auth.base import Auth, TokenSessionAuth, logout, refresh_token
from cerberus_client.auth.iam import IAMAuth
from cerberus_client.auth.sts import STSAuth
from cerberus_client.auth.token import TokenAuth
from cerberus_client.auth.user import UserAuth
from cerberus_client.config import CerberusSettings
from cerberus_client.errors import ConfigurationError
from cerberus_client.utils import new_http_client


class AuthMethod(Enum):
    """Supported authentication methods."""

    TOKEN = "token"
    USER = "user"
    STS = "sts"
    IAM = "iam"


def get_auth(
    method: AuthMethod | str,
    *,
    http_client: httpx.Client | None = None,
    **config,
) -> Auth:
    """Factory to create an authentication method.

    Args:
        method: The authentication method to use
        http_client: HTTP client used for the auth endpoints
        **config: Method-specific configuration

    Returns:
        Configured Auth instance

    Raises:
        ConfigurationError: If required configuration is missing
        ValueError: If the method is not supported
    """
    if isinstance(method, str):
        method = AuthMethod(method)

    try:
        if method == AuthMethod.TOKEN:
            return TokenAuth(config["url"], config["token"], http_client=http_client)

        elif method == AuthMethod.USER:
            return UserAuth(
                config["url"],
                config["username"],
                config["password"],
                http_client=http_client,
            )

        elif method == AuthMethod.STS:
            return STSAuth(config["url"], config["region"], http_client=http_client)

        elif method == AuthMethod.IAM:
            return IAMAuth(
                config["url"],
                config["role_arn"],
                config["region"],
                http_client=http_client,
            )
    except KeyError as e:
        raise ConfigurationError(f"Missing configuration for {method.value} auth: {e}") from e

    raise ValueError(f"Unsupported auth method: {method}")


def auth_from_settings(settings: CerberusSettings) -> Auth:
    """Pick an authentication method from settings.

    A token wins, then username and password, then an IAM role ARN with a
    region, then an AWS region alone for STS.
    """
    http_client = new_http_client(timeout=settings.timeout, verify=settings.verify_ssl)
    url = settings.url or ""
    if settings.token:
        return get_auth(AuthMethod.TOKEN, http_client=http_client, url=url, token=settings.token)
    if settings.username and settings.password:
        return get_auth(
            AuthMethod.USER,
            http_client=http_client,
            url=url,
            username=settings.username,
            password=settings.password,
        )
    if settings.role_arn and settings.region:
        return get_auth(
            AuthMethod.IAM,
            http_client=http_client,
            url=url,
            role_arn=settings.role_arn,
            region=settings.region,
        )
    if settings.region:
        return get_auth(AuthMethod.STS, http_client=http_client, url=url, region=settings.region)
    raise ConfigurationError(
        "No credentials configured. Set CERBERUS_TOKEN, CERBERUS_USERNAME and "
        "CERBERUS_PASSWORD, CERBERUS_ROLE_ARN and CERBERUS_REGION, or CERBERUS_REGION"
    )


__all__ = [
    "Auth",
    "AuthMethod",
    "IAMAuth",
    "STSAuth",
    "TokenAuth",
    "TokenSessionAuth",
    "UserAuth",
    "auth_from_settings",
    "get_auth",
    "logout",
    "refresh_token",
]
