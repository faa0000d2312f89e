"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import httpx
import pytest

from cerberus_client.auth import Auth
from cerberus_client.client import CerberusClient
from cerberus_client.config import CerberusSettings
from tests.helpers import MockAuth


@pytest.fixture(autouse=True)
def clean_cerberus_env(monkeypatch):
    """Keep CERBERUS_* variables from the host out of the tests."""
    for name in (
        "CERBERUS_URL",
        "CERBERUS_TOKEN",
        "CERBERUS_USERNAME",
        "CERBERUS_PASSWORD",
        "CERBERUS_REGION",
        "CERBERUS_ROLE_ARN",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_settings():
    """Settings with a single attempt and no backoff delay."""
    return CerberusSettings(
        _env_file=None,
        backoff_initial_interval=0,
        backoff_max_interval=0,
        backoff_max_elapsed=0,
    )


@pytest.fixture
def mock_auth():
    return MockAuth()


@pytest.fixture
def make_client(mock_auth, fast_settings):
    """Build a client whose requests go to the given handler."""

    def _make(handler, auth: Auth | None = None, settings: CerberusSettings | None = None):
        return CerberusClient(
            auth or mock_auth,
            settings=settings or fast_settings,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def auth_http():
    """Build an HTTP client for auth methods that sends requests to the given handler."""

    def _make(handler):
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make
