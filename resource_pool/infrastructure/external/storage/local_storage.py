"""Local filesystem blob backend with path validation and atomic writes."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from resource_pool.application.services.size_policy import bounded_chunks
from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ResourceNotFoundError,
    ResourcePoolException,
    SizeExceededError,
)

logger = logging.getLogger(__name__)


class LocalBlobBackend:
    """Local filesystem storage rooted at local_root/namespace_key.

    Keys map to relative paths and are validated against the namespace
    directory. Writes stream into a temp file in the target directory and
    are published with os.replace, so readers never see partial content and
    concurrent writers of the same key converge on one complete file.
    """

    def __init__(self, local_root: str, namespace_key: str) -> None:
        """Initialize local storage.

        Args:
            local_root: Base directory shared by all pools on this host.
            namespace_key: Subdirectory isolating this pool's objects.
        """
        self.storage_root = (Path(local_root) / namespace_key).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, key: str) -> Path:
        """Resolve and validate path under storage_root. Raises ResourcePoolException if traversal."""
        full_path = (self.storage_root / key).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise ResourcePoolException(
                f"Key escapes storage root: {key}",
                "INVALID_STORAGE_KEY",
                {"key": key},
            ) from e
        if full_path == self.storage_root:
            raise ResourcePoolException(
                f"Key names the storage root: {key!r}",
                "INVALID_STORAGE_KEY",
                {"key": key},
            )
        return full_path

    def put(self, key: str, content: BinaryIO, max_size: int | None = None) -> int:
        """Stream content into place atomically. Returns bytes written."""
        target_path = self._get_full_path(key)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
        except OSError as e:
            raise BackendUnavailableError(key, str(e)) from e

        written = 0
        try:
            with os.fdopen(temp_fd, "wb") as f:
                for chunk in bounded_chunks(content, max_size):
                    f.write(chunk)
                    written += len(chunk)
            os.chmod(temp_path, 0o640)
            os.replace(temp_path, target_path)
        except SizeExceededError:
            logger.info("Aborted oversized write for %s", key)
            raise
        except OSError as e:
            logger.warning("Local write failed for %s: %s", key, e)
            raise BackendUnavailableError(key, str(e)) from e
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
        return written

    def get(self, key: str) -> bytes:
        file_path = self._get_full_path(key)
        try:
            return file_path.read_bytes()
        except FileNotFoundError as e:
            raise ResourceNotFoundError(key) from e
        except OSError as e:
            raise BackendUnavailableError(key, str(e)) from e

    def exists(self, key: str) -> tuple[bool, int]:
        file_path = self._get_full_path(key)
        try:
            stat = file_path.stat()
        except FileNotFoundError:
            return False, 0
        except OSError as e:
            raise BackendUnavailableError(key, str(e)) from e
        if not file_path.is_file():
            return False, 0
        return True, stat.st_size

    def delete(self, key: str) -> bool:
        """Delete file and prune empty shard directories. Returns True if deleted."""
        file_path = self._get_full_path(key)
        try:
            file_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BackendUnavailableError(key, str(e)) from e
        parent = file_path.parent
        while parent != self.storage_root:
            try:
                if not any(parent.iterdir()):
                    parent.rmdir()
                    parent = parent.parent
                else:
                    break
            except OSError:
                # Another writer repopulated the shard; leave it.
                break
        return True
