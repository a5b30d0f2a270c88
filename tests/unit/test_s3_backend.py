"""S3 backend tests against a stubbed botocore client (no network)."""

import io
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.response import StreamingBody
from botocore.stub import ANY, Stubber

from resource_pool.domain.exceptions import (
    BackendUnavailableError,
    ResourceNotFoundError,
    SizeExceededError,
)
from resource_pool.infrastructure.external.storage.s3_storage import S3BlobBackend

BUCKET = "test-cc-resources"
KEY = "a9/99/a9993e364706816aba3e25717850c26c9cd0d89d"


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="fake_aws_key_id",
        aws_secret_access_key="fake_secret_access_key",
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def backend(s3_client) -> S3BlobBackend:
    return S3BlobBackend(bucket=BUCKET, client=s3_client)


def test_exists_reports_content_length(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_response(
        "head_object", {"ContentLength": 500}, {"Bucket": BUCKET, "Key": KEY}
    )
    assert backend.exists(KEY) == (True, 500)


def test_exists_absent_on_404(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_client_error(
        "head_object",
        service_error_code="404",
        http_status_code=404,
        expected_params={"Bucket": BUCKET, "Key": KEY},
    )
    assert backend.exists(KEY) == (False, 0)


def test_exists_other_error_is_backend_unavailable(
    backend: S3BlobBackend, stubber: Stubber
) -> None:
    stubber.add_client_error(
        "head_object", service_error_code="503", http_status_code=503
    )
    with pytest.raises(BackendUnavailableError) as exc_info:
        backend.exists(KEY)
    assert exc_info.value.retryable is True
    assert exc_info.value.details["key"] == KEY


def test_put_sends_measured_length(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_response(
        "put_object",
        {"ETag": '"etag"'},
        {
            "Bucket": BUCKET,
            "Key": KEY,
            "Body": ANY,
            "ContentLength": 3,
            "ContentType": "application/octet-stream",
        },
    )
    assert backend.put(KEY, io.BytesIO(b"abc"), max_size=1024) == 3


def test_oversized_put_never_reaches_s3(backend: S3BlobBackend, stubber: Stubber) -> None:
    with pytest.raises(SizeExceededError):
        backend.put(KEY, io.BytesIO(b"x" * 1025), max_size=1024)
    # No response queued: any put_object call would have failed the stubber.


def test_put_failure_is_backend_unavailable(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_client_error("put_object", service_error_code="InternalError", http_status_code=500)
    with pytest.raises(BackendUnavailableError):
        backend.put(KEY, io.BytesIO(b"abc"))


def test_get_returns_body(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_response(
        "get_object",
        {"Body": StreamingBody(io.BytesIO(b"abc"), 3)},
        {"Bucket": BUCKET, "Key": KEY},
    )
    assert backend.get(KEY) == b"abc"


def test_get_missing_is_not_found(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
    with pytest.raises(ResourceNotFoundError):
        backend.get(KEY)


def test_delete_present(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_response("head_object", {"ContentLength": 3}, {"Bucket": BUCKET, "Key": KEY})
    stubber.add_response("delete_object", {}, {"Bucket": BUCKET, "Key": KEY})
    assert backend.delete(KEY) is True


def test_delete_absent(backend: S3BlobBackend, stubber: Stubber) -> None:
    stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
    assert backend.delete(KEY) is False


def test_connection_error_is_backend_unavailable() -> None:
    client = MagicMock()
    client.head_object.side_effect = EndpointConnectionError(endpoint_url="http://s3.invalid")
    backend = S3BlobBackend(bucket=BUCKET, client=client)
    with pytest.raises(BackendUnavailableError) as exc_info:
        backend.exists(KEY)
    assert "s3.invalid" in exc_info.value.details["reason"]
