"""Tests for BlobBackendFactory provider selection."""

from pathlib import Path

import pytest

from resource_pool.domain.exceptions import ConfigurationError
from resource_pool.domain.value_objects import BackendConnection, PoolConfiguration
from resource_pool.infrastructure.external.storage import BlobBackendFactory
from resource_pool.infrastructure.external.storage.local_storage import LocalBlobBackend
from resource_pool.infrastructure.external.storage.memory_storage import (
    InMemoryBlobBackend,
)
from resource_pool.infrastructure.external.storage.s3_storage import S3BlobBackend
from tests.conftest import NAMESPACE_KEY


def config_for(**connection) -> PoolConfiguration:
    return PoolConfiguration(
        namespace_key=NAMESPACE_KEY,
        maximum_size=1098,
        backend_connection=BackendConnection(**connection),
    )


def test_local_backend(tmp_path: Path) -> None:
    backend = BlobBackendFactory.create_backend(
        config_for(provider="local", local_root=str(tmp_path))
    )
    assert isinstance(backend, LocalBlobBackend)
    assert backend.storage_root == (tmp_path / NAMESPACE_KEY).resolve()
    assert backend.storage_root.is_dir()


def test_local_backend_requires_root() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        BlobBackendFactory.create_backend(config_for(provider="local"))
    assert exc_info.value.details == {"setting": "resource_pool_local_root"}


@pytest.mark.parametrize("provider", ["AWS", "aws", "s3"])
def test_s3_backend_uses_namespace_as_bucket(provider: str) -> None:
    backend = BlobBackendFactory.create_backend(
        config_for(
            provider=provider,
            credentials={
                "aws_access_key_id": "fake_aws_key_id",
                "aws_secret_access_key": "fake_secret_access_key",
            },
        )
    )
    assert isinstance(backend, S3BlobBackend)
    assert backend.bucket == NAMESPACE_KEY
    assert backend.region == "us-east-1"


def test_s3_backend_rejects_half_credentials() -> None:
    with pytest.raises(ConfigurationError):
        BlobBackendFactory.create_backend(
            config_for(provider="aws", credentials={"aws_access_key_id": "fake_aws_key_id"})
        )


def test_memory_backend() -> None:
    backend = BlobBackendFactory.create_backend(config_for(provider="memory"))
    assert isinstance(backend, InMemoryBlobBackend)
    assert backend.namespace_key == NAMESPACE_KEY


def test_unknown_provider() -> None:
    with pytest.raises(ConfigurationError, match="Unknown storage provider"):
        BlobBackendFactory.create_backend(config_for(provider="ftp"))
