"""Size policy gate: maximum object size at match time and store time."""

from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO

from resource_pool.domain.exceptions import SizeExceededError

CHUNK_SIZE = 64 * 1024  # 64KB


class SizePolicy:
    """Single responsibility: decide whether a byte count may enter the pool.

    The boundary is inclusive: size == maximum_size is allowed.
    """

    def __init__(self, maximum_size: int) -> None:
        if maximum_size < 0:
            raise ValueError(f"maximum_size must be non-negative, got {maximum_size}")
        self.maximum_size = maximum_size

    def allows(self, size: int) -> bool:
        return size <= self.maximum_size

    def check(self, size: int, checksum: str | None = None) -> None:
        """Raise SizeExceededError when size is over the limit."""
        if not self.allows(size):
            raise SizeExceededError(size, self.maximum_size, checksum)


def bounded_chunks(
    stream: BinaryIO,
    limit: int | None,
    chunk_size: int = CHUNK_SIZE,
) -> Iterator[bytes]:
    """Yield chunks from stream, failing once the running total passes limit.

    Measures the real byte count while streaming, so a caller cannot slip
    oversized content past a small declared size. Backends write what this
    yields to a temporary location and only publish after exhaustion, so an
    abort leaves no PoolEntry behind.

    Args:
        stream: Readable binary stream.
        limit: Maximum total bytes; None disables the check.
        chunk_size: Read size per chunk.

    Raises:
        SizeExceededError: As soon as more than limit bytes have been read.
    """
    total = 0
    while chunk := stream.read(chunk_size):
        total += len(chunk)
        if limit is not None and total > limit:
            raise SizeExceededError(total, limit)
        yield chunk
