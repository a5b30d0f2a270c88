"""Domain layer: value objects and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ChecksumSizeMismatchError,
    ConfigurationError,
    InvalidDescriptorError,
    ResourceNotFoundError,
    ResourcePoolException,
    SizeExceededError,
)
from resource_pool.domain.value_objects import (
    BackendConnection,
    MatchResult,
    PoolConfiguration,
    ResourceDescriptor,
    StorageKey,
)

__all__ = [
    # Exceptions
    "BackendUnavailableError",
    "ChecksumSizeMismatchError",
    "ConfigurationError",
    "InvalidDescriptorError",
    "ResourceNotFoundError",
    "ResourcePoolException",
    "SizeExceededError",
    # Value objects
    "BackendConnection",
    "MatchResult",
    "PoolConfiguration",
    "ResourceDescriptor",
    "StorageKey",
]
