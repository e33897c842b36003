"""Test configuration and fixtures for do-client."""

from unittest.mock import MagicMock

import pytest

from mock_api import FIXED_NOW


@pytest.fixture
def clock():
    """Clock frozen a fraction of a second past FIXED_NOW."""
    return lambda: FIXED_NOW + 0.4


@pytest.fixture
def sleeps():
    """Collect sleep durations; pass ``sleeps.append`` as the sleep function."""
    return []


@pytest.fixture
def logger():
    """Logger double capturing structlog-style calls."""
    return MagicMock()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep host credentials and tuning out of the tests."""
    for name in (
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "DIGITALOCEAN_TOKEN",
        "DIGITALOCEAN_ACCESS_TOKEN",
        "DIGITALOCEAN_API_URL",
        "SPACES_ENDPOINT_URL",
        "SPACES_ACCESS_KEY_ID",
        "SPACES_SECRET_ACCESS_KEY",
        "DIGITALOCEAN_HTTP_RETRY_MAX",
        "DIGITALOCEAN_HTTP_RETRY_WAIT_MIN",
        "DIGITALOCEAN_HTTP_RETRY_WAIT_MAX",
    ):
        monkeypatch.delenv(name, raising=False)
