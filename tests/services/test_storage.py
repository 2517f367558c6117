# mypy: ignore-errors
# tests/services/test_storage.py
"""Tests for the S3 object storage adapter."""

import pytest
from botocore.exceptions import ClientError

from pulse_stage.core.errors import InvalidInputError, StorageFailureError
from pulse_stage.core.settings import Settings
from pulse_stage.services.storage import ObjectStorage


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)


def test_upload_puts_object_and_returns_public_url(object_storage, storage_client) -> None:
    """Test that uploads go to the configured bucket under the key prefix."""
    url = object_storage.upload(b"png-bytes", "my photo.png", "image/png")

    kwargs = storage_client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "pulse-test"
    assert kwargs["Body"] == b"png-bytes"
    assert kwargs["ContentType"] == "image/png"
    assert kwargs["Key"].startswith("post-images/")
    assert kwargs["Key"].endswith("-my_photo.png")
    assert url == f"https://pulse-test.s3.eu-west-1.amazonaws.com/{kwargs['Key']}"


def test_upload_failure_raises_storage_error(object_storage, storage_client) -> None:
    """Test that client errors surface as storage failures."""
    storage_client.put_object.side_effect = _client_error("PutObject")
    with pytest.raises(StorageFailureError, match="Failed to upload file"):
        object_storage.upload(b"x", "a.png", "image/png")


def test_upload_without_bucket_is_rejected(storage_client) -> None:
    """Test that a missing bucket configuration is reported."""
    storage = ObjectStorage(Settings(), client=storage_client)  # type: ignore[call-arg]
    with pytest.raises(InvalidInputError, match="S3 bucket not configured"):
        storage.upload(b"x", "a.png", "image/png")
    storage_client.put_object.assert_not_called()


def test_delete_resolves_key_from_url(object_storage, storage_client) -> None:
    """Test that delete-by-URL targets the original key."""
    url = object_storage.public_url("post-images/1-2-a.png")
    assert object_storage.delete(url) is True
    storage_client.delete_object.assert_called_once_with(
        Bucket="pulse-test", Key="post-images/1-2-a.png"
    )


def test_delete_failure_is_reported_not_raised(object_storage, storage_client) -> None:
    """Test that failed deletes return False."""
    storage_client.delete_object.side_effect = _client_error("DeleteObject")
    assert object_storage.delete(object_storage.public_url("post-images/k.png")) is False


def test_custom_endpoint_urls_round_trip(storage_client) -> None:
    """Test path-style URLs for S3-compatible endpoints."""
    config = Settings(  # type: ignore[call-arg]
        AWS_S3_BUCKET="media",
        AWS_S3_ENDPOINT_URL="http://minio:9000/",
    )
    storage = ObjectStorage(config, client=storage_client)

    url = storage.public_url("post-images/k.png")
    assert url == "http://minio:9000/media/post-images/k.png"
    assert storage.key_from_url(url) == "post-images/k.png"
