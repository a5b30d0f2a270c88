"""Resource API: thin routes over ResourcePool.match_resources / add_resource.

Handlers run on the event loop. They only await pool operations, which
dispatch every backend call to the reactor bridge's workers.
"""

import tempfile
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from resource_pool.api.v1.dependencies import get_resource_pool
from resource_pool.application.services.resource_pool import ResourcePool
from resource_pool.domain.exceptions import SizeExceededError
from resource_pool.domain.value_objects import ResourceDescriptor
from resource_pool.schemas.resource import (
    SHA1_PATTERN,
    ResourceDescriptorSchema,
    ResourceMatchResponse,
)

router = APIRouter()

# Upload bodies stay in memory up to this size, then roll over to a temp file.
UPLOAD_SPOOL_LIMIT = 8 * 1024 * 1024  # 8MB

Sha1 = Annotated[str, Path(pattern=SHA1_PATTERN, description="SHA-1 hex digest")]


@router.put("/match", response_model=ResourceMatchResponse)
async def match_resources(
    descriptors: list[ResourceDescriptorSchema],
    pool: ResourcePool = Depends(get_resource_pool),
) -> ResourceMatchResponse:
    """Report which manifest entries are already stored."""
    result = await pool.match_resources(d.to_domain() for d in descriptors)
    return ResourceMatchResponse(
        matched=[ResourceDescriptorSchema.from_domain(d) for d in result.matched],
        unmatched=[ResourceDescriptorSchema.from_domain(d) for d in result.unmatched],
        rejected=[ResourceDescriptorSchema.from_domain(d) for d in result.rejected],
    )


@router.put("/{sha1}", response_model=ResourceDescriptorSchema, status_code=201)
async def upload_resource(
    request: Request,
    sha1: Sha1,
    size: Annotated[int, Query(ge=0, description="Declared size in bytes")],
    pool: ResourcePool = Depends(get_resource_pool),
) -> ResourceDescriptorSchema:
    """Store the raw request body under sha1."""
    descriptor = ResourceDescriptor(sha1, size)
    pool.size_policy.check(size, sha1)

    # Stop reading as soon as the body passes the limit; the backend
    # re-measures what it stores.
    with tempfile.SpooledTemporaryFile(max_size=UPLOAD_SPOOL_LIMIT) as body:
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
            if received > pool.maximum_size:
                raise SizeExceededError(received, pool.maximum_size, sha1)
            body.write(chunk)
        body.seek(0)
        stored = await pool.add_resource(body, descriptor)
    return ResourceDescriptorSchema.from_domain(stored)


@router.get("/{sha1}", response_class=Response)
async def download_resource(
    sha1: Sha1,
    pool: ResourcePool = Depends(get_resource_pool),
) -> Response:
    """Return stored content for sha1 (404 if absent)."""
    data = await pool.get_resource(sha1)
    return Response(content=data, media_type="application/octet-stream")
