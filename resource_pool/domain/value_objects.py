"""Domain value objects for the resource pool.

Value objects are immutable types that represent pool concepts with
self-validation. They have no identity beyond their values, except
ResourceDescriptor whose identity is its checksum alone.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# SHA-1 hex digest: 160 bits, 40 lowercase hex characters.
_CHECKSUM_RE = re.compile(r"^[0-9a-f]{40}$")


def validate_checksum(checksum: str) -> None:
    """Raise ValueError unless checksum is a 40-char lowercase hex SHA-1."""
    if not isinstance(checksum, str) or not _CHECKSUM_RE.match(checksum):
        raise ValueError(
            f"Checksum must be a 40-character lowercase hex SHA-1, got {checksum!r}"
        )


@dataclass(frozen=True)
class ResourceDescriptor:
    """A content digest plus the declared byte count of that content.

    Equality and hashing consider the checksum only; size is declared
    metadata that the pool re-verifies against the backend.
    """

    checksum: str
    size: int = field(compare=False)

    def __post_init__(self) -> None:
        validate_checksum(self.checksum)
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValueError(f"Size must be an integer, got {self.size!r}")
        if self.size < 0:
            raise ValueError(f"Size must be non-negative, got {self.size}")

    def with_size(self, size: int) -> "ResourceDescriptor":
        """Return a descriptor for the same checksum with another size."""
        return ResourceDescriptor(self.checksum, size)


@dataclass(frozen=True)
class StorageKey:
    """Backend-facing name of a PoolEntry.

    partition: directory-prefix segment ("ab/cd").
    leaf: identifier inside the partition (the full checksum).
    """

    partition: str
    leaf: str

    @property
    def path(self) -> str:
        """Slash-joined key as stored by every backend."""
        return f"{self.partition}/{self.leaf}"

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class MatchResult:
    """Classification of a descriptor manifest.

    matched: entry exists with the declared size.
    unmatched: content must be uploaded (includes mismatched).
    rejected: declared size above maximum_size; never matched or uploaded.
    mismatched: entry exists but its recorded size differs.
    """

    matched: tuple[ResourceDescriptor, ...] = ()
    unmatched: tuple[ResourceDescriptor, ...] = ()
    rejected: tuple[ResourceDescriptor, ...] = ()
    mismatched: tuple[ResourceDescriptor, ...] = ()


@dataclass(frozen=True)
class BackendConnection:
    """Connection profile selecting and configuring a storage backend."""

    provider: str
    credentials: Mapping[str, str] = field(default_factory=dict, repr=False)
    local_root: str | None = None
    region: str | None = None
    endpoint_url: str | None = None

    def __post_init__(self) -> None:
        # Freeze the credential mapping so the configuration stays immutable.
        object.__setattr__(
            self, "credentials", MappingProxyType(dict(self.credentials))
        )


@dataclass(frozen=True)
class PoolConfiguration:
    """Process-wide pool settings, built once at startup.

    namespace_key: bucket or directory isolating this pool's objects.
    maximum_size: largest object, in bytes, the pool will admit.
    backend_connection: provider selection and credentials.
    """

    namespace_key: str
    maximum_size: int
    backend_connection: BackendConnection

    def __post_init__(self) -> None:
        if not self.namespace_key:
            raise ValueError("namespace_key must be a non-empty string")
        if "/" in self.namespace_key or self.namespace_key in (".", ".."):
            raise ValueError(
                f"namespace_key must be a single path segment, got {self.namespace_key!r}"
            )
        if self.maximum_size < 0:
            raise ValueError(
                f"maximum_size must be non-negative, got {self.maximum_size}"
            )
