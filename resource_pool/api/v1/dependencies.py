"""Presentation-layer dependency injection (composition root).

Routes depend on the pool wired by the lifespan, never on backends directly.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from resource_pool.application.services.resource_pool import ResourcePool


def get_resource_pool(request: Request) -> ResourcePool:
    """Return the process-wide pool. 503 if startup has not completed."""
    pool = getattr(request.app.state, "resource_pool", None)
    if pool is None:
        raise HTTPException(status_code=503, detail="Resource pool not ready")
    return pool
