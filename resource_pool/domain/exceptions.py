"""Domain exceptions for the resource pool.

Every failure the pool can report derives from ResourcePoolException so the
presentation layer can map it to an HTTP response from error_code alone.
Per-item outcomes (size exceeded, size mismatch) and whole-operation failures
(backend unavailable, configuration) share the same shape.
"""

from typing import Any


class ResourcePoolException(Exception):
    """Base exception for all resource pool errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. checksum, key).
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class ConfigurationError(ResourcePoolException):
    """Invalid or missing provider/credentials at startup. Fatal."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class InvalidDescriptorError(ResourcePoolException):
    """Malformed checksum or size supplied by a caller."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class SizeExceededError(ResourcePoolException):
    """Declared or measured size is above the pool's maximum_size."""

    def __init__(
        self, size: int, maximum_size: int, checksum: str | None = None
    ) -> None:
        details: dict[str, Any] = {"size": size, "maximum_size": maximum_size}
        if checksum:
            details["checksum"] = checksum
        super().__init__(
            f"Resource size {size} exceeds maximum of {maximum_size} bytes",
            "SIZE_EXCEEDED",
            details,
        )


class ChecksumSizeMismatchError(ResourcePoolException):
    """Backend-recorded size disagrees with the declared size for a checksum.

    Never raised to callers: the matcher logs it and treats the descriptor
    as unmatched so the content gets re-uploaded.
    """

    def __init__(self, checksum: str, declared_size: int, stored_size: int) -> None:
        super().__init__(
            f"Stored size {stored_size} for {checksum} does not match declared size {declared_size}",
            "CHECKSUM_SIZE_MISMATCH",
            {
                "checksum": checksum,
                "declared_size": declared_size,
                "stored_size": stored_size,
            },
        )


class BackendUnavailableError(ResourcePoolException):
    """Transient failure reaching the storage provider. Caller may retry."""

    retryable = True

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Storage backend unavailable for {key}",
            "BACKEND_UNAVAILABLE",
            {"key": key, "reason": reason},
        )


class ResourceNotFoundError(ResourcePoolException):
    """No PoolEntry at the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Resource not found: {key}",
            "RESOURCE_NOT_FOUND",
            {"key": key},
        )
