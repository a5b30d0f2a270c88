"""Shared wiring for operational scripts: build a pool from settings."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from resource_pool.application.services.resource_pool import ResourcePool
from resource_pool.core.config import get_settings
from resource_pool.infrastructure.external.storage import BlobBackendFactory
from resource_pool.infrastructure.reactor_bridge import ReactorBridge


@asynccontextmanager
async def open_pool() -> AsyncIterator[ResourcePool]:
    """Yield a ResourcePool for the configured backend; shut the bridge down on exit."""
    settings = get_settings()
    config = settings.to_pool_configuration()
    bridge = ReactorBridge(max_workers=settings.resource_pool_max_workers)
    try:
        backend = await bridge.run("connect", BlobBackendFactory.create_backend, config)
        yield ResourcePool(config, backend, bridge)
    finally:
        await asyncio.to_thread(bridge.shutdown)
