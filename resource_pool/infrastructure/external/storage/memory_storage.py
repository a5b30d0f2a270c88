"""In-memory blob backend: deterministic fake for tests and local development."""

from __future__ import annotations

import threading
from typing import BinaryIO

from resource_pool.application.services.size_policy import bounded_chunks
from resource_pool.domain.exceptions import ResourceNotFoundError


class InMemoryBlobBackend:
    """Dict-backed storage with the same put/get/exists/delete semantics.

    Content is fully measured before it is published, matching the real
    backends' abort-without-entry behavior on oversized writes. A single
    lock serializes access to the dict; reads of the source stream happen
    outside it.
    """

    def __init__(self, namespace_key: str = "memory") -> None:
        self.namespace_key = namespace_key
        self._objects: dict[str, bytes] = {}
        self._lock = threading.Lock()
        self.put_count = 0

    def put(self, key: str, content: BinaryIO, max_size: int | None = None) -> int:
        data = b"".join(bounded_chunks(content, max_size))
        with self._lock:
            self._objects[key] = data
            self.put_count += 1
        return len(data)

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._objects[key]
            except KeyError:
                raise ResourceNotFoundError(key) from None

    def exists(self, key: str) -> tuple[bool, int]:
        with self._lock:
            data = self._objects.get(key)
        if data is None:
            return False, 0
        return True, len(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._objects.pop(key, None) is not None

    @property
    def object_count(self) -> int:
        with self._lock:
            return len(self._objects)

    def keys(self) -> list[str]:
        """Stored keys, sorted (test helper)."""
        with self._lock:
            return sorted(self._objects)

    def corrupt(self, key: str, data: bytes) -> None:
        """Replace stored bytes without going through put (test helper)."""
        with self._lock:
            self._objects[key] = data
