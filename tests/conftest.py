"""Shared fixtures: anyio backend, deterministic clocks and stubbed HTTP."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from oauth_client.http_client import HttpClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture()
def anyio_backend() -> str:
    """Run ``@pytest.mark.anyio`` tests on asyncio only."""
    return "asyncio"


@pytest.fixture()
def fake_clock_factory() -> Callable[[float], Callable[[], float]]:
    """Return a factory building clocks frozen at a given timestamp."""

    def _factory(now: float) -> Callable[[], float]:
        return lambda now=now: now

    return _factory


@pytest.fixture()
def mock_http() -> Callable[[Handler], HttpClient]:
    """Return a factory wrapping *handler* in an ``HttpClient`` backed by ``httpx.MockTransport``."""

    def _factory(handler: Handler) -> HttpClient:
        return HttpClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    return _factory


def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
