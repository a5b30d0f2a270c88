"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of the bridge, backend and pool.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from resource_pool.application.services.resource_pool import ResourcePool
from resource_pool.core.config import get_settings
from resource_pool.infrastructure.external.storage import BlobBackendFactory
from resource_pool.infrastructure.reactor_bridge import ReactorBridge

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: pool configuration (ConfigurationError aborts startup),
    bridge, backend (constructed on a worker since it may touch disk or
    network), pool. Shutdown lets in-flight operations finish.
    """
    settings = get_settings()

    # ---- Startup ----
    config = settings.to_pool_configuration()
    bridge = ReactorBridge(max_workers=settings.resource_pool_max_workers)
    try:
        backend = await bridge.run(
            "connect",
            BlobBackendFactory.create_backend,
            config,
            max_pool_connections=settings.resource_pool_max_workers,
        )
    except Exception:
        await asyncio.to_thread(bridge.shutdown)
        raise

    app.state.reactor_bridge = bridge
    app.state.blob_backend = backend
    app.state.resource_pool = ResourcePool(config, backend, bridge)
    logger.info(
        "Resource pool ready: namespace=%s provider=%s maximum_size=%d workers=%d",
        config.namespace_key,
        config.backend_connection.provider,
        config.maximum_size,
        bridge.max_workers,
    )

    yield

    # ---- Shutdown ----
    pending = len(bridge.in_flight)
    if pending:
        logger.info("Waiting for %d in-flight pool operations", pending)
    await asyncio.to_thread(bridge.shutdown)
    app.state.resource_pool = None
    logger.info("Reactor bridge shut down")
