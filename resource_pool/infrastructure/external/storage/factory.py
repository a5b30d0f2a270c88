"""Blob backend factory: creates local, S3 or in-memory backend from configuration."""

from __future__ import annotations

import logging

from resource_pool.application.interfaces.storage import IBlobBackend
from resource_pool.domain.exceptions import ConfigurationError
from resource_pool.domain.value_objects import PoolConfiguration

logger = logging.getLogger(__name__)

LOCAL_PROVIDERS = frozenset({"local"})
S3_PROVIDERS = frozenset({"aws", "s3"})
MEMORY_PROVIDERS = frozenset({"memory"})


class BlobBackendFactory:
    """Factory for blob backend instances based on the pool configuration."""

    @staticmethod
    def create_backend(
        config: PoolConfiguration, max_pool_connections: int = 10
    ) -> IBlobBackend:
        """Create the backend selected by config.backend_connection.provider.

        Args:
            config: Immutable pool configuration.
            max_pool_connections: Connection pool size for remote backends.

        Returns:
            LocalBlobBackend, S3BlobBackend or InMemoryBlobBackend.

        Raises:
            ConfigurationError: Unknown provider or missing required settings.
        """
        connection = config.backend_connection
        provider = connection.provider.lower()

        if provider in LOCAL_PROVIDERS:
            from resource_pool.infrastructure.external.storage.local_storage import (
                LocalBlobBackend,
            )

            if not connection.local_root:
                raise ConfigurationError(
                    "RESOURCE_POOL_LOCAL_ROOT required for local backend",
                    setting="resource_pool_local_root",
                )
            return LocalBlobBackend(
                local_root=connection.local_root,
                namespace_key=config.namespace_key,
            )
        if provider in S3_PROVIDERS:
            access_key = connection.credentials.get("aws_access_key_id")
            secret_key = connection.credentials.get("aws_secret_access_key")
            if bool(access_key) != bool(secret_key):
                raise ConfigurationError(
                    "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together",
                    setting="aws_access_key_id",
                )
            from resource_pool.infrastructure.external.storage.s3_storage import (
                S3BlobBackend,
            )

            return S3BlobBackend(
                bucket=config.namespace_key,
                region=connection.region or "us-east-1",
                endpoint_url=connection.endpoint_url,
                access_key=access_key,
                secret_key=secret_key,
                max_pool_connections=max_pool_connections,
            )
        if provider in MEMORY_PROVIDERS:
            from resource_pool.infrastructure.external.storage.memory_storage import (
                InMemoryBlobBackend,
            )

            logger.warning(
                "Using in-memory blob backend for %s; content is lost on exit",
                config.namespace_key,
            )
            return InMemoryBlobBackend(namespace_key=config.namespace_key)
        raise ConfigurationError(
            f"Unknown storage provider: {connection.provider!r}. "
            "Supported: 'local', 'aws', 's3', 'memory'",
            setting="resource_pool_provider",
        )
