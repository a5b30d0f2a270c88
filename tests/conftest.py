"""Pytest configuration and fixtures for the resource pool.

Pool fixtures use the in-memory backend and a small worker pool. HTTP tests
run resource_pool.main:create_app() with its lifespan entered by hand, since
ASGITransport does not send lifespan events.
"""

import hashlib
from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from resource_pool.application.services.resource_pool import ResourcePool
from resource_pool.core.config import get_settings
from resource_pool.domain.value_objects import (
    BackendConnection,
    PoolConfiguration,
    ResourceDescriptor,
)
from resource_pool.infrastructure.external.storage.memory_storage import (
    InMemoryBlobBackend,
)
from resource_pool.infrastructure.reactor_bridge import ReactorBridge

NAMESPACE_KEY = "test-cc-resources"
MAXIMUM_SIZE = 1024


def descriptor_for(content: bytes) -> ResourceDescriptor:
    """Descriptor with the real SHA-1 and length of content."""
    return ResourceDescriptor(hashlib.sha1(content).hexdigest(), len(content))


def make_config(maximum_size: int = MAXIMUM_SIZE, provider: str = "memory") -> PoolConfiguration:
    return PoolConfiguration(
        namespace_key=NAMESPACE_KEY,
        maximum_size=maximum_size,
        backend_connection=BackendConnection(provider=provider),
    )


@pytest.fixture
async def bridge() -> AsyncIterator[ReactorBridge]:
    """Bridge with four workers, shut down after the test."""
    b = ReactorBridge(max_workers=4, thread_name_prefix="test-pool-io")
    yield b
    b.shutdown()


@pytest.fixture
def memory_backend() -> InMemoryBlobBackend:
    return InMemoryBlobBackend(namespace_key=NAMESPACE_KEY)


@pytest.fixture
def pool(memory_backend: InMemoryBlobBackend, bridge: ReactorBridge) -> ResourcePool:
    """Pool with maximum_size=1024 over the in-memory backend."""
    return ResourcePool(make_config(), memory_backend, bridge)


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch):
    """FastAPI app configured for the in-memory backend."""
    monkeypatch.setenv("RESOURCE_POOL_PROVIDER", "memory")
    monkeypatch.setenv("RESOURCE_POOL_NAMESPACE_KEY", NAMESPACE_KEY)
    monkeypatch.setenv("RESOURCE_POOL_MAXIMUM_SIZE", str(MAXIMUM_SIZE))
    monkeypatch.setenv("RESOURCE_POOL_MAX_WORKERS", "4")
    get_settings.cache_clear()
    from resource_pool.main import create_app

    yield create_app()
    get_settings.cache_clear()


@pytest.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), lifespan included."""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
