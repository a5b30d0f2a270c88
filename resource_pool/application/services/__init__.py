"""Application services: key derivation, size policy, resource pool."""

from resource_pool.application.services.namespace import derive_key
from resource_pool.application.services.resource_pool import ResourcePool
from resource_pool.application.services.size_policy import SizePolicy, bounded_chunks

__all__ = [
    "ResourcePool",
    "SizePolicy",
    "bounded_chunks",
    "derive_key",
]
