"""S3-compatible blob backend (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import logging
import tempfile
from typing import Any, BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from resource_pool.application.services.size_policy import bounded_chunks
from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_not_found(error: ClientError) -> bool:
    return str(error.response.get("Error", {}).get("Code")) in _NOT_FOUND_CODES


class S3BlobBackend:
    """S3 storage with the pool's namespace_key as the bucket.

    One boto3 client is created up front and shared by every worker thread;
    boto3 clients are thread-safe (sessions are not, so none is kept).
    Content is spooled to memory, or to disk past SPOOL_LIMIT, while its
    size is measured, then sent with a single put_object.
    """

    SPOOL_LIMIT = 8 * 1024 * 1024  # 8MB

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        max_pool_connections: int = 10,
        client: Any | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name (the pool's namespace_key).
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            max_pool_connections: HTTP connection pool size; match it to the
                bridge's worker count.
            client: Prebuilt client (tests pass a stubbed one).
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        if client is not None:
            self._client = client
            return
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(max_pool_connections=max_pool_connections),
            **extra,
        )

    def put(self, key: str, content: BinaryIO, max_size: int | None = None) -> int:
        with tempfile.SpooledTemporaryFile(max_size=self.SPOOL_LIMIT) as spool:
            written = 0
            for chunk in bounded_chunks(content, max_size):
                spool.write(chunk)
                written += len(chunk)
            spool.seek(0)
            try:
                self._client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=spool,
                    ContentLength=written,
                    ContentType="application/octet-stream",
                )
            except (ClientError, BotoCoreError) as e:
                logger.warning("S3 put failed for %s: %s", key, e)
                raise BackendUnavailableError(key, str(e)) from e
        return written

    def get(self, key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=self.bucket, Key=key)
            return resp["Body"].read()
        except ClientError as e:
            if _is_not_found(e):
                raise ResourceNotFoundError(key) from e
            raise BackendUnavailableError(key, str(e)) from e
        except BotoCoreError as e:
            raise BackendUnavailableError(key, str(e)) from e

    def exists(self, key: str) -> tuple[bool, int]:
        try:
            head = self._client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                return False, 0
            logger.warning("S3 head failed for %s: %s", key, e)
            raise BackendUnavailableError(key, str(e)) from e
        except BotoCoreError as e:
            logger.warning("S3 head failed for %s: %s", key, e)
            raise BackendUnavailableError(key, str(e)) from e
        return True, int(head["ContentLength"])

    def delete(self, key: str) -> bool:
        """Delete object. Returns True if it existed."""
        present, _ = self.exists(key)
        if not present:
            return False
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise BackendUnavailableError(key, str(e)) from e
        return True
