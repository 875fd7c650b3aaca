"""Pytest configuration and fixtures.

Cache tests run against tests.fakes.FakeRedis injected into KeyValueCache;
HTTP tests use an app built by create_app() with services wired to that
cache (ASGITransport does not run the lifespan).
"""

import pytest
from httpx import ASGITransport, AsyncClient

from assistant.core.config import get_settings
from assistant.core.lifespan import build_services, close_services
from assistant.infrastructure.cache import KeyValueCache, ReconnectPolicy
from assistant.main import create_app
from tests.fakes import FakeRedis

FAST_RECONNECT = ReconnectPolicy(max_attempts=3, max_total_seconds=5.0, base_delay=0.0, max_delay=0.0)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def cache(fake_redis: FakeRedis) -> KeyValueCache:
    """Connected KeyValueCache over FakeRedis, shut down after the test."""
    kv = KeyValueCache(client=fake_redis, policy=FAST_RECONNECT)
    assert await kv.connect()
    yield kv
    await kv.shutdown()


@pytest.fixture
async def offline_cache() -> KeyValueCache:
    """Cache that was never connected (no client): every op returns its safe default."""
    kv = KeyValueCache(None)
    yield kv
    await kv.shutdown()


@pytest.fixture
async def app(cache: KeyValueCache):
    """FastAPI app with services built on the fake-backed cache."""
    application = create_app()
    build_services(application, cache, get_settings())
    yield application
    await close_services(application)


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"X-User-ID": "u1"}
