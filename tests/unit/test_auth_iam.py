"""Tests for IAM principal authentication."""

from __future__ import annotations

import json

import httpx
import pytest

from cerberus_client.auth import IAMAuth
from cerberus_client.auth.base import LOGOUT_PATH, REFRESH_PATH, TOKEN_HEADER
from cerberus_client.auth.iam import IAM_AUTH_PATH
from cerberus_client.errors import (
    CerberusRequestError,
    ConfigurationError,
    UnauthenticatedError,
    UnauthorizedError,
)
from tests.helpers import BASE_URL, REFRESHED_TOKEN, TOKEN, Router, auth_body, unreachable

ROLE_ARN = "arn:aws:iam::111111111111:role/fake-role"

IAM_BODY = {
    "client_token": TOKEN,
    "policies": ["default"],
    "metadata": {"aws_region": "us-west-2", "iam_principal_arn": ROLE_ARN},
    "lease_duration": 3600,
    "renewable": True,
}


def _auth(http_client: httpx.Client) -> IAMAuth:
    return IAMAuth(BASE_URL, ROLE_ARN, "us-west-2", http_client=http_client)


class TestIAMAuthInit:
    """Tests for IAMAuth construction."""

    @pytest.mark.parametrize(
        "url,role_arn,region",
        [
            ("", ROLE_ARN, "us-west-2"),
            (BASE_URL, "", "us-west-2"),
            (BASE_URL, ROLE_ARN, ""),
        ],
    )
    def test_missing_values(self, url, role_arn, region):
        """Test every parameter is required."""
        with pytest.raises(ConfigurationError):
            IAMAuth(url, role_arn, region)

    def test_env_url_overrides(self, monkeypatch):
        """Test CERBERUS_URL replaces the URL passed in."""
        monkeypatch.setenv("CERBERUS_URL", "https://other.example.com")

        assert IAMAuth(BASE_URL, ROLE_ARN, "us-west-2").get_url().host == "other.example.com"

    def test_not_authenticated(self):
        auth = IAMAuth(BASE_URL, ROLE_ARN, "us-west-2")

        assert not auth.is_authenticated()
        with pytest.raises(UnauthenticatedError):
            auth.get_headers()
        with pytest.raises(UnauthenticatedError):
            auth.refresh()


class TestIAMAuthLogin:
    """Tests for IAMAuth.get_token."""

    def test_login(self, auth_http):
        """Test the principal and region are posted and the token stored."""
        router = Router({("POST", IAM_AUTH_PATH): [httpx.Response(200, json=IAM_BODY)]})
        auth = _auth(auth_http(router))

        token = auth.get_token()

        assert token == TOKEN
        assert auth.get_headers()[TOKEN_HEADER] == TOKEN
        assert auth.get_expiry() is not None
        assert json.loads(router.requests[0].content) == {
            "iam_principal_arn": ROLE_ARN,
            "region": "us-west-2",
        }

    def test_existing_token_reused(self, auth_http):
        router = Router({("POST", IAM_AUTH_PATH): [httpx.Response(200, json=IAM_BODY)]})
        auth = _auth(auth_http(router))

        auth.get_token()
        auth.get_token()

        assert len(router.requests) == 1

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected(self, auth_http, status):
        """Test a rejected principal raises UnauthorizedError."""
        router = Router({("POST", IAM_AUTH_PATH): [httpx.Response(status)]})

        with pytest.raises(UnauthorizedError):
            _auth(auth_http(router)).get_token()

    def test_server_error(self, auth_http):
        """Test other failures raise a request error with the status."""
        router = Router({("POST", IAM_AUTH_PATH): [httpx.Response(500)]})

        with pytest.raises(CerberusRequestError) as exc_info:
            _auth(auth_http(router)).get_token()

        assert exc_info.value.status_code == 500

    def test_bad_body(self, auth_http):
        router = Router({("POST", IAM_AUTH_PATH): [httpx.Response(200, content=b"{}")]})

        with pytest.raises(CerberusRequestError, match="parse"):
            _auth(auth_http(router)).get_token()

    def test_unreachable_server(self, auth_http):
        with pytest.raises(CerberusRequestError):
            _auth(auth_http(unreachable)).get_token()


class TestIAMAuthSession:
    """Tests for refresh and logout after logging in."""

    def test_refresh_uses_refresh_endpoint(self, auth_http):
        """Test a refresh goes through the refresh endpoint, not a new login."""
        router = Router(
            {
                ("POST", IAM_AUTH_PATH): [httpx.Response(200, json=IAM_BODY)],
                ("GET", REFRESH_PATH): [httpx.Response(200, json=auth_body(REFRESHED_TOKEN))],
            }
        )
        auth = _auth(auth_http(router))
        auth.get_token()

        auth.refresh()

        assert len(router.requests_to("POST", IAM_AUTH_PATH)) == 1
        assert router.requests_to("GET", REFRESH_PATH)[0].headers[TOKEN_HEADER] == TOKEN
        assert auth.get_token() == REFRESHED_TOKEN
        assert auth.get_headers()[TOKEN_HEADER] == REFRESHED_TOKEN

    def test_logout(self, auth_http):
        router = Router(
            {
                ("POST", IAM_AUTH_PATH): [httpx.Response(200, json=IAM_BODY)],
                ("DELETE", LOGOUT_PATH): [httpx.Response(204)],
            }
        )
        auth = _auth(auth_http(router))
        auth.get_token()

        auth.logout()

        assert not auth.is_authenticated()
