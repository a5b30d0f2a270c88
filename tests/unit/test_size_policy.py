"""Tests for the size policy gate (declared and streamed sizes)."""

import io

import pytest

from resource_pool.application.services.size_policy import SizePolicy, bounded_chunks
from resource_pool.domain.exceptions import SizeExceededError


class TestSizePolicy:
    """Boundary is inclusive: maximum_size passes, maximum_size + 1 fails."""

    def test_allows_up_to_maximum(self) -> None:
        policy = SizePolicy(1024)
        assert policy.allows(0)
        assert policy.allows(1024)
        assert not policy.allows(1025)

    def test_check_raises_with_details(self) -> None:
        policy = SizePolicy(1024)
        policy.check(1024)
        with pytest.raises(SizeExceededError) as exc_info:
            policy.check(1025, "a" * 40)
        assert exc_info.value.details == {
            "size": 1025,
            "maximum_size": 1024,
            "checksum": "a" * 40,
        }

    def test_negative_maximum_raises(self) -> None:
        with pytest.raises(ValueError):
            SizePolicy(-1)


class TestBoundedChunks:
    """Streaming measurement aborts once the limit is passed."""

    def test_yields_all_bytes_within_limit(self) -> None:
        data = b"x" * 10_000
        out = b"".join(bounded_chunks(io.BytesIO(data), 10_000, chunk_size=1000))
        assert out == data

    def test_raises_past_limit(self) -> None:
        chunks = bounded_chunks(io.BytesIO(b"x" * 10_001), 10_000, chunk_size=1000)
        with pytest.raises(SizeExceededError) as exc_info:
            list(chunks)
        assert exc_info.value.details["maximum_size"] == 10_000

    def test_raises_before_reading_everything(self) -> None:
        stream = io.BytesIO(b"x" * 100_000)
        with pytest.raises(SizeExceededError):
            for _ in bounded_chunks(stream, 1000, chunk_size=500):
                pass
        assert stream.tell() < 100_000

    def test_no_limit(self) -> None:
        data = b"y" * 5000
        assert b"".join(bounded_chunks(io.BytesIO(data), None)) == data

    def test_empty_stream(self) -> None:
        assert list(bounded_chunks(io.BytesIO(b""), 0)) == []
