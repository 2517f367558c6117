"""S3-compatible object storage for post images."""
from __future__ import annotations

import logging
import random
import re
import time
from functools import lru_cache
from typing import Any
from urllib.parse import urlsplit

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from pulse_stage.core.errors import InvalidInputError, StorageFailureError
from pulse_stage.core.settings import Settings, settings

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ObjectStorage:
    """Upload and delete-by-URL against a single bucket."""

    def __init__(self, config: Settings, client: Any | None = None) -> None:
        self.bucket = config.s3_bucket
        self.region = config.s3_region
        self.endpoint_url = config.s3_endpoint_url
        self.key_prefix = config.s3_key_prefix.strip("/")
        self._client = client
        self._config = config

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                aws_access_key_id=self._config.s3_access_key_id,
                aws_secret_access_key=self._config.s3_secret_access_key,
            )
        return self._client

    def _require_bucket(self) -> str:
        if not self.bucket:
            raise InvalidInputError("S3 bucket not configured")
        return self.bucket

    def build_key(self, filename: str) -> str:
        """Return a unique object key ``<prefix>/<millis>-<random>-<name>``."""
        safe_name = _UNSAFE_KEY_CHARS.sub("_", filename or "upload").strip("_") or "upload"
        stamp = int(time.time() * 1000)
        nonce = random.randint(0, 10**9)
        return f"{self.key_prefix}/{stamp}-{nonce}-{safe_name}"

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def key_from_url(self, url: str) -> str:
        """Recover the object key from a URL produced by :meth:`public_url`."""
        path = urlsplit(url).path.lstrip("/")
        if self.endpoint_url and path.startswith(f"{self.bucket}/"):
            return path[len(self.bucket) + 1:]
        return path

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        """Store ``data`` and return its public URL.

        Raises:
            InvalidInputError: If no bucket is configured.
            StorageFailureError: If the upload fails.
        """
        bucket = self._require_bucket()
        key = self.build_key(filename)
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload of %s failed: %s", key, exc, exc_info=True)
            raise StorageFailureError("Failed to upload file") from exc
        return self.public_url(key)

    def delete(self, url: str) -> bool:
        """Delete the object behind ``url``.

        Failures are logged and reported through the return value; the object
        may already be gone.
        """
        if not url:
            return False
        bucket = self._require_bucket()
        key = self.key_from_url(url)
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("S3 delete of %s failed: %s", key, exc)
            return False
        return True


@lru_cache(maxsize=1)
def get_object_storage() -> ObjectStorage:
    """Return the shared object storage adapter."""
    return ObjectStorage(settings)
