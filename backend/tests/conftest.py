"""Shared fixtures for the CORS middleware tests."""
import asyncio
import os

os.environ["ENVIRONMENT"] = "development"
os.environ["CORS_ORIGINS"] = "*"

import pytest
from fastapi.testclient import TestClient

from corsware.core.config import get_settings
from corsware.cors.http import CollectedResponse, RequestContext
from corsware.main import create_app


def run(coro):
    return asyncio.run(coro)


def make_request(method: str = "GET", **headers: str) -> RequestContext:
    """Build a request; keyword names map to headers (``request_headers`` -> Access-Control-Request-Headers)."""
    names = {
        "origin": "Origin",
        "request_headers": "Access-Control-Request-Headers",
        "request_method": "Access-Control-Request-Method",
    }
    return RequestContext.build(method, {names.get(k, k): v for k, v in headers.items()})


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def response():
    return CollectedResponse()


@pytest.fixture
def make_client():
    """Return a factory building a TestClient around the app with the given CORS options."""

    def _make(options=None, raise_server_exceptions: bool = True) -> TestClient:
        app = create_app(cors_options=options)
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make
