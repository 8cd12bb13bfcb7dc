"""
Abstract base class for blob storage backends.

Uploaded audio must become visible to readers all at once: a backend
either publishes the complete object under its key or nothing at all.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import PurePath


def make_object_key(filename: str, now: datetime | None = None) -> str:
    """Build a unique, date-partitioned object key for an upload.

    Only the extension of the client-supplied filename is kept, so keys
    never contain user-controlled path segments.
    """
    now = now or datetime.now(UTC)
    ext = PurePath(filename).suffix.lower()
    return f"{now:%Y/%m/%d}/{uuid.uuid4().hex}{ext}"


class BlobStorage(ABC):
    """Interface that every blob storage backend must implement."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under *key* and return a durable fetchable URL.

        Args:
            key: Destination object key (see ``make_object_key``).
            data: The complete object body.
            content_type: MIME type recorded with the object.

        Returns:
            URL that resolves to the stored bytes.

        Raises:
            UploadFailedError: If the object could not be stored. No partial
                object is left visible under *key*.
        """
