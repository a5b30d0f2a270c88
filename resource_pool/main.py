"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, routers. No pool logic
here (SRP). See resource_pool.core.lifespan and
resource_pool.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from resource_pool.api.v1 import api_router
from resource_pool.core.config import get_settings
from resource_pool.core.exception_handlers import register_exception_handlers
from resource_pool.core.lifespan import create_lifespan
from resource_pool.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
