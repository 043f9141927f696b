# tests/conftest.py
"""
Pytest configuration and shared fixtures.
"""

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Union

import orjson
import pytest
from yarl import URL

from kucoin_shared.clients.transport import BaseTransport, RawResponse
from kucoin_shared.config.models import Credentials, ExchangeSettings
from kucoin_shared.core.enums import ApiGeneration

Route = Union[RawResponse, Exception, Callable[[], RawResponse], List[Any]]


def current_ok(data: Any, status: int = 200) -> RawResponse:
    return RawResponse(status, orjson.dumps({"code": "200000", "data": data}))


def legacy_ok(data: Any, status: int = 200) -> RawResponse:
    return RawResponse(status, orjson.dumps({"success": True, "code": "OK", "msg": "", "data": data}))


def bare(document: Any, status: int = 200) -> RawResponse:
    return RawResponse(status, orjson.dumps(document))


class FakeTransport(BaseTransport):
    """
    Answers by URL path and records every request it receives.

    A route is a RawResponse (answered every time), an exception (raised),
    a zero-arg callable producing a RawResponse, or a list consumed in order.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def close(self):
        self.closed = True

    async def request(self, method, url, headers, body=None) -> RawResponse:
        parsed = URL(url, encoded=True)
        self.calls.append(
            {
                "method": method,
                "url": url,
                "path": parsed.path,
                "query": parsed.raw_query_string,
                "headers": dict(headers),
                "body": body,
            }
        )
        if parsed.path not in self.routes:
            raise AssertionError(f"Unexpected request to {parsed.path}")
        route = self.routes[parsed.path]
        if isinstance(route, list):
            route = route.pop(0)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route()
        return route

    def calls_to(self, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["path"] == path]


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables between tests."""
    import os

    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Builds a FakeTransport from a path -> route mapping."""
    return FakeTransport


@pytest.fixture
def envelopes():
    return SimpleNamespace(current_ok=current_ok, legacy_ok=legacy_ok, bare=bare)


@pytest.fixture
def current_credentials():
    return Credentials(key="test-key", secret="test-secret", passphrase="test-pass")


@pytest.fixture
def legacy_credentials():
    return Credentials(key="legacy-key", secret="legacy-secret")


@pytest.fixture
def current_settings():
    return ExchangeSettings.for_generation(ApiGeneration.CURRENT)


@pytest.fixture
def legacy_settings():
    return ExchangeSettings.for_generation(ApiGeneration.LEGACY)
