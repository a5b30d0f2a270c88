"""Sharded storage namespace: checksum -> StorageKey.

Keys are "ab/cd/<checksum>": two levels of two hex characters bound the
entries per directory (or per listing prefix) to a 16^4 fan-out. The layout
must never change, since previously stored content has to stay
discoverable across restarts.
"""

from resource_pool.domain.value_objects import StorageKey, validate_checksum

SHARD_WIDTH = 2
SHARD_DEPTH = 2


def derive_key(checksum: str) -> StorageKey:
    """Derive the storage key for a checksum.

    Pure and deterministic: depends on nothing but the checksum.

    Args:
        checksum: 40-char lowercase hex SHA-1.

    Returns:
        StorageKey with partition "ab/cd" and leaf equal to the checksum.

    Raises:
        ValueError: If checksum is not a valid SHA-1 hex digest.
    """
    validate_checksum(checksum)
    segments = [
        checksum[i * SHARD_WIDTH : (i + 1) * SHARD_WIDTH] for i in range(SHARD_DEPTH)
    ]
    return StorageKey(partition="/".join(segments), leaf=checksum)


def partition_count() -> int:
    """Number of distinct partitions the namespace spreads content over."""
    return 16 ** (SHARD_WIDTH * SHARD_DEPTH)
