"""Pytest configuration and fixtures for the storefront gateway.

Fallback fixtures run against a fresh seeded store with near-zero simulated
latency. Live fixtures route every HTTP call through httpx.MockTransport,
so no test touches the network.
"""

from collections.abc import Callable

import httpx
import pytest

from storefront.core.config import Settings
from storefront.infrastructure.gateway.fallback import FallbackGateway

AUTH_DELAY = 0.01


def make_settings(**overrides) -> Settings:
    """Settings isolated from .env, with fast fallback timings."""
    values = {
        "fallback_latency_seconds": 0.0,
        "fallback_auth_delay_seconds": AUTH_DELAY,
        "request_timeout_seconds": 1.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def live_settings(**overrides) -> Settings:
    """Settings carrying a real-looking Firebase web config."""
    values = {
        "firebase_api_key": "AIza-test-key",
        "firebase_project_id": "demo-shop",
        "firebase_auth_domain": "demo-shop.firebaseapp.com",
        "firebase_storage_bucket": "demo-shop.appspot.com",
    }
    values.update(overrides)
    return make_settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
async def gateway(settings: Settings) -> FallbackGateway:
    """Fallback gateway over its own seeded store."""
    gw = FallbackGateway(settings)
    yield gw
    await gw.aclose()


@pytest.fixture
async def mock_http():
    """Factory for an AsyncClient whose requests are answered by ``handler``."""
    clients: list[httpx.AsyncClient] = []

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield build
    for client in clients:
        await client.aclose()
