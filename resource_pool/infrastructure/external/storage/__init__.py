"""Blob backends: local filesystem, S3-compatible and in-memory.

Factory creates a backend from the pool configuration. Implementations are
loaded lazily inside BlobBackendFactory.create_backend() so that boto3 is
only imported when the S3 backend is selected.

Implementations satisfy IBlobBackend (put, get, exists, delete).
"""

from resource_pool.infrastructure.external.storage.factory import BlobBackendFactory

__all__ = ["BlobBackendFactory"]
