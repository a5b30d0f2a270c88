"""API version 1."""

from resource_pool.api.v1.router import api_router

__all__ = ["api_router"]
