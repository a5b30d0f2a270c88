"""Exception handlers mapping pool failures to HTTP responses.

Every error body has the ResourcePoolException.to_dict() shape:
{"error", "message", "details", "retryable"}. Retryable failures also get
a Retry-After header so upload clients back off and try again.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resource_pool.core.config import get_settings
from resource_pool.domain.exceptions import ResourcePoolException

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_STORAGE_KEY": 400,
    "RESOURCE_NOT_FOUND": 404,
    "SIZE_EXCEEDED": 413,
    "CONFIGURATION_ERROR": 500,
    "BACKEND_UNAVAILABLE": 503,
}


def _error_response(
    status_code: int,
    error: str,
    message: Any,
    details: Any = None,
    retryable: bool = False,
) -> JSONResponse:
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if retryable else None
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "error": error,
                "message": message,
                "details": details if details is not None else {},
                "retryable": retryable,
            }
        ),
        headers=headers,
    )


def _pool_exception_handler(request: Request, exc: ResourcePoolException) -> JSONResponse:
    status_code = STATUS_BY_ERROR_CODE.get(exc.error_code, 400)
    if status_code >= 500:
        logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    body = exc.to_dict()
    return _error_response(status_code, body["error"], body["message"], body["details"], exc.retryable)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 for malformed manifests, checksums or sizes."""
    return _error_response(422, "VALIDATION_ERROR", "Request validation failed", exc.errors())


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 503 here means the pool is not wired yet; the caller can retry.
    return _error_response(
        exc.status_code, "HTTP_ERROR", exc.detail, retryable=exc.status_code == 503
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the pool, validation, HTTP and catch-all handlers on app."""
    app.add_exception_handler(ResourcePoolException, _pool_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
