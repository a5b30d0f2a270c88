"""Resource pool: global content deduplication over a blob backend.

Matches descriptor manifests against stored content and stores new content
under keys derived from its checksum. Every backend call goes through the
reactor bridge so the event loop thread never blocks on storage.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

import aiofiles

from resource_pool.application.interfaces.storage import IBlobBackend
from resource_pool.application.services.namespace import derive_key
from resource_pool.application.services.size_policy import CHUNK_SIZE, SizePolicy
from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ChecksumSizeMismatchError,
    InvalidDescriptorError,
    ResourcePoolException,
)
from resource_pool.domain.value_objects import (
    MatchResult,
    PoolConfiguration,
    ResourceDescriptor,
)
from resource_pool.infrastructure.reactor_bridge import OperationOutcome, ReactorBridge

logger = logging.getLogger(__name__)


def _dedupe(descriptors: Iterable[ResourceDescriptor]) -> list[ResourceDescriptor]:
    """First occurrence of each checksum, in input order."""
    seen: set[str] = set()
    unique = []
    for descriptor in descriptors:
        if descriptor.checksum not in seen:
            seen.add(descriptor.checksum)
            unique.append(descriptor)
    return unique


def _describe_file_sync(path: Path) -> ResourceDescriptor:
    """Blocking: SHA-1 and byte count of a local file (run on a worker)."""
    sha1 = hashlib.sha1()
    total = 0
    with path.open("rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            sha1.update(chunk)
            total += len(chunk)
    return ResourceDescriptor(sha1.hexdigest(), total)


def _list_files_sync(root: Path) -> list[Path]:
    """Blocking: every regular file under root, sorted (run on a worker)."""
    files = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file() and not path.is_symlink():
                files.append(path)
    return sorted(files)


class ResourcePool:
    """Content-addressed deduplicating store for uploaded application bits.

    Built from an immutable PoolConfiguration, a backend and a bridge; holds
    no other mutable state, so one instance serves every request.
    """

    def __init__(
        self,
        config: PoolConfiguration,
        backend: IBlobBackend,
        bridge: ReactorBridge,
    ) -> None:
        self.config = config
        self.backend = backend
        self.bridge = bridge
        self.size_policy = SizePolicy(config.maximum_size)

    @property
    def maximum_size(self) -> int:
        return self.config.maximum_size

    def key_for(self, checksum: str) -> str:
        """Storage key path for a checksum. Raises InvalidDescriptorError."""
        try:
            return derive_key(checksum).path
        except ValueError as e:
            raise InvalidDescriptorError(str(e), field="checksum") from e

    async def match_resources(
        self, descriptors: Iterable[ResourceDescriptor]
    ) -> MatchResult:
        """Classify descriptors as matched, unmatched or rejected.

        Read-only. Oversized descriptors are rejected without a backend
        query. Every other distinct checksum gets one concurrent exists
        query, and each input descriptor is then classified against its
        own declared size, so descriptors repeating a checksum all appear
        in the result in input order. An entry counts as a match only when
        its recorded size equals the declared size.

        Raises:
            BackendUnavailableError: If any exists query failed. Raised after
                every query has been delivered.
        """
        descriptors = list(descriptors)
        rejected = [d for d in descriptors if not self.size_policy.allows(d.size)]
        eligible = [d for d in descriptors if self.size_policy.allows(d.size)]

        keys = {d.checksum: self.key_for(d.checksum) for d in eligible}
        operations = [
            self.bridge.submit("exists", self.backend.exists, key) for key in keys.values()
        ]
        outcomes: list[OperationOutcome] = await asyncio.gather(
            *(self.bridge.wait(op) for op in operations)
        )
        by_checksum = dict(zip(keys, outcomes))

        failures = [(c, o) for c, o in by_checksum.items() if not o.ok]
        if failures:
            checksum, outcome = failures[0]
            if isinstance(outcome.error, ResourcePoolException):
                raise outcome.error
            raise BackendUnavailableError(keys[checksum], str(outcome.error)) from outcome.error

        matched: list[ResourceDescriptor] = []
        unmatched: list[ResourceDescriptor] = []
        mismatched: list[ResourceDescriptor] = []
        for descriptor in eligible:
            outcome = by_checksum[descriptor.checksum]
            present, stored_size = outcome.value
            if not present:
                unmatched.append(descriptor)
            elif stored_size == descriptor.size:
                matched.append(descriptor)
            else:
                anomaly = ChecksumSizeMismatchError(
                    descriptor.checksum, descriptor.size, stored_size
                )
                logger.warning("%s (operation %s)", anomaly.message, outcome.operation_id)
                unmatched.append(descriptor)
                mismatched.append(descriptor)

        logger.debug(
            "Matched %d of %d resources (%d rejected, %d queries)",
            len(matched),
            len(descriptors),
            len(rejected),
            len(operations),
        )
        return MatchResult(
            matched=tuple(matched),
            unmatched=tuple(unmatched),
            rejected=tuple(rejected),
            mismatched=tuple(mismatched),
        )

    async def add_resource(
        self, content: BinaryIO, descriptor: ResourceDescriptor
    ) -> ResourceDescriptor:
        """Store content under the key derived from the declared checksum.

        The checksum is trusted as declared. The size is gated twice: the
        declared size here, the measured size while the backend streams.

        Returns:
            Descriptor with the declared checksum and the bytes actually stored.

        Raises:
            SizeExceededError: Declared or measured size above maximum_size.
            BackendUnavailableError: Storage provider failure.
        """
        self.size_policy.check(descriptor.size, descriptor.checksum)
        key = self.key_for(descriptor.checksum)
        stored = await self.bridge.run(
            "put", self.backend.put, key, content, self.maximum_size
        )
        if stored != descriptor.size:
            logger.warning(
                "Stored %d bytes for %s, declared %d", stored, descriptor.checksum, descriptor.size
            )
        logger.info("Stored resource %s (%d bytes)", descriptor.checksum, stored)
        return descriptor.with_size(stored)

    async def add_path(self, path: Path) -> ResourceDescriptor | None:
        """Checksum and store one local file. Returns None if it is too large."""
        descriptor = await self.bridge.run("describe", _describe_file_sync, Path(path))
        if not self.size_policy.allows(descriptor.size):
            logger.info("Skipping %s: %d bytes exceeds maximum", path, descriptor.size)
            return None

        def _put_file() -> int:
            with Path(path).open("rb") as f:
                return self.backend.put(self.key_for(descriptor.checksum), f, self.maximum_size)

        stored = await self.bridge.run("put", _put_file)
        return descriptor.with_size(stored)

    async def add_directory(self, root: Path) -> list[ResourceDescriptor]:
        """Add every regular file under root, skipping oversized ones."""
        files = await self.bridge.run("walk", _list_files_sync, Path(root))
        results = await asyncio.gather(*(self.add_path(path) for path in files))
        added = _dedupe(d for d in results if d is not None)
        logger.info("Added %d unique resources from %s", len(added), root)
        return added

    async def resource_sizes(
        self, descriptors: Iterable[ResourceDescriptor]
    ) -> list[ResourceDescriptor]:
        """Stored sizes for the descriptors that exist, in input order."""
        unique = _dedupe(descriptors)
        stats = await asyncio.gather(
            *(
                self.bridge.run("exists", self.backend.exists, self.key_for(d.checksum))
                for d in unique
            )
        )
        return [
            descriptor.with_size(size)
            for descriptor, (present, size) in zip(unique, stats)
            if present
        ]

    async def get_resource(self, checksum: str) -> bytes:
        """Stored content for a checksum. Raises ResourceNotFoundError."""
        return await self.bridge.run("get", self.backend.get, self.key_for(checksum))

    async def copy(self, descriptor: ResourceDescriptor, destination: Path) -> None:
        """Write the stored content for descriptor to a local file."""
        data = await self.get_resource(descriptor.checksum)
        destination = Path(destination)
        await self.bridge.run("mkdir", destination.parent.mkdir, parents=True, exist_ok=True)
        async with aiofiles.open(destination, "wb") as f:
            await f.write(data)

    async def delete_resource(self, checksum: str) -> bool:
        """Remove a PoolEntry (operational tooling only)."""
        deleted = await self.bridge.run("delete", self.backend.delete, self.key_for(checksum))
        if deleted:
            logger.info("Deleted resource %s", checksum)
        return deleted
