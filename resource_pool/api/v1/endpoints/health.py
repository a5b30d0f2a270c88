"""Health check endpoints. Used for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from resource_pool.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Pool not wired yet"}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 once the lifespan has wired the pool; 503 before that."""
    bridge = getattr(request.app.state, "reactor_bridge", None)
    if getattr(request.app.state, "resource_pool", None) is None or bridge is None:
        return JSONResponse(status_code=503, content={"status": "not_ready"})
    return ReadinessResponse(in_flight=len(bridge.in_flight))
