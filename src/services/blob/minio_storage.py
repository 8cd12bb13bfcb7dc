"""MinIO / S3-compatible blob storage."""

import io
import logging
from datetime import timedelta

from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError as TransportError

from src.core.exceptions import UploadFailedError
from src.services.blob.base import BlobStorage

logger = logging.getLogger(__name__)


class MinioBlobStorage(BlobStorage):
    """Stores objects in a MinIO bucket.

    ``put_object`` only publishes an object once the whole body has been
    received, so failed uploads never leave a readable partial object.

    Args:
        client: Configured ``Minio`` client.
        bucket_name: Target bucket (created on first use if missing).
        public_url: Base URL for public objects; empty = presigned GET URLs.
        url_expiry: Lifetime of presigned URLs.
    """

    def __init__(
        self,
        client: Minio,
        bucket_name: str,
        public_url: str = "",
        url_expiry: timedelta = timedelta(days=7),
    ) -> None:
        self._client = client
        self._bucket_name = bucket_name
        self._public_url = public_url.rstrip("/")
        self._url_expiry = url_expiry
        self._bucket_checked = False

    def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        if not self._client.bucket_exists(self._bucket_name):
            self._client.make_bucket(self._bucket_name)
            logger.info("Bucket created: %s", self._bucket_name)
        self._bucket_checked = True

    def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self._ensure_bucket()
            self._client.put_object(
                bucket_name=self._bucket_name,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
            if self._public_url:
                url = f"{self._public_url}/{self._bucket_name}/{key}"
            else:
                url = self._client.presigned_get_object(
                    self._bucket_name, key, expires=self._url_expiry
                )
        except (S3Error, TransportError, OSError, ValueError) as exc:
            logger.exception("MinIO upload failed for %s", key)
            raise UploadFailedError(f"Failed to store '{key}': {exc}") from exc

        logger.info("Uploaded %s to bucket %s (%d bytes)", key, self._bucket_name, len(data))
        return url
