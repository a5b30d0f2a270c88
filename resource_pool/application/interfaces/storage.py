"""Blob backend interface (port) used by the resource pool.

Implementations: LocalBlobBackend, S3BlobBackend, InMemoryBlobBackend.
All methods block; the pool only ever calls them from worker threads via
the reactor bridge, so every implementation must tolerate concurrent calls.
"""

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class IBlobBackend(Protocol):
    """Protocol for content-addressed blob storage backends."""

    def put(self, key: str, content: BinaryIO, max_size: int | None = None) -> int:
        """Store content at key; return bytes written.

        Raises SizeExceededError (nothing written) when content is larger than
        max_size, BackendUnavailableError on I/O failure. Overwrites are
        allowed and idempotent for identical bytes.
        """
        ...

    def get(self, key: str) -> bytes:
        """Return stored content. Raises ResourceNotFoundError when absent."""
        ...

    def exists(self, key: str) -> tuple[bool, int]:
        """Return (present, recorded_size); (False, 0) when absent."""
        ...

    def delete(self, key: str) -> bool:
        """Remove the entry. Returns False when it was absent."""
        ...
