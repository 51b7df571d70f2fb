"""Shared test fixtures."""

import time
from unittest.mock import MagicMock

import jwt
import pytest

from fpp_api.auth.session_storage import MemorySessionStorage
from fpp_api.context import ApiVersion, Context

SHOP = "test-shop.myfunpinpin.com"
API_KEY = "test_api_key"
API_SECRET = "test_api_secret"
HOST_NAME = "test-app.example.com"


def _make_response(status_code=200, body=None, headers=None, reason="OK"):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.headers = headers or {}
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = {} if body is None else body
    return response


def _make_session_token(secret=API_SECRET, **overrides):
    """Mint an embedded-app session token."""
    now = int(time.time())
    payload = {
        "iss": f"https://{SHOP}/admin",
        "dest": f"https://{SHOP}",
        "aud": API_KEY,
        "sub": "42",
        "exp": now + 60,
        "nbf": now - 5,
        "iat": now - 5,
        "jti": "4321",
        "sid": "abc123",
    }
    payload.update(overrides)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def make_session_token():
    return _make_session_token


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def context(storage):
    """Non-embedded app context."""
    return Context(
        api_key=API_KEY,
        api_secret_key=API_SECRET,
        scopes=["read_products", "write_products"],
        host_name=HOST_NAME,
        api_version=ApiVersion.APRIL_22,
        is_embedded_app=False,
        session_storage=storage,
    )


@pytest.fixture
def embedded_context(storage):
    """Embedded app context."""
    return Context(
        api_key=API_KEY,
        api_secret_key=API_SECRET,
        scopes=["read_products", "write_products"],
        host_name=HOST_NAME,
        api_version=ApiVersion.APRIL_22,
        is_embedded_app=True,
        session_storage=storage,
    )
