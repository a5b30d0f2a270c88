"""Tests for pool exceptions (error_code, message, details, retryable)."""

from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ChecksumSizeMismatchError,
    ConfigurationError,
    InvalidDescriptorError,
    ResourceNotFoundError,
    ResourcePoolException,
    SizeExceededError,
)

CHECKSUM = "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = ResourcePoolException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ResourcePoolException"
    assert exc.details == {}
    assert exc.retryable is False


def test_to_dict() -> None:
    exc = ResourcePoolException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
        "retryable": False,
    }


def test_configuration_error() -> None:
    exc = ConfigurationError("bad provider", setting="resource_pool_provider")
    assert exc.error_code == "CONFIGURATION_ERROR"
    assert exc.details == {"setting": "resource_pool_provider"}
    assert ConfigurationError("bad").details == {}


def test_invalid_descriptor_error() -> None:
    exc = InvalidDescriptorError("Invalid checksum", field="sha1")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "sha1"}


def test_size_exceeded_error() -> None:
    """SizeExceededError carries size and limit; checksum only when known."""
    exc = SizeExceededError(2000, 1024)
    assert exc.error_code == "SIZE_EXCEEDED"
    assert exc.details == {"size": 2000, "maximum_size": 1024}
    assert "2000" in exc.message

    exc = SizeExceededError(2000, 1024, CHECKSUM)
    assert exc.details["checksum"] == CHECKSUM


def test_checksum_size_mismatch_error() -> None:
    exc = ChecksumSizeMismatchError(CHECKSUM, declared_size=999, stored_size=500)
    assert exc.error_code == "CHECKSUM_SIZE_MISMATCH"
    assert exc.details == {
        "checksum": CHECKSUM,
        "declared_size": 999,
        "stored_size": 500,
    }


def test_backend_unavailable_is_retryable() -> None:
    exc = BackendUnavailableError("a9/99/" + CHECKSUM, "timeout")
    assert exc.error_code == "BACKEND_UNAVAILABLE"
    assert exc.retryable is True
    assert exc.to_dict()["retryable"] is True
    assert exc.details == {"key": "a9/99/" + CHECKSUM, "reason": "timeout"}


def test_resource_not_found_error() -> None:
    exc = ResourceNotFoundError("a9/99/" + CHECKSUM)
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert CHECKSUM in exc.message
    assert isinstance(exc, ResourcePoolException)
