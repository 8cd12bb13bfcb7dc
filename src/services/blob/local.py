"""Filesystem blob storage served back by the API at ``/files/{key}``."""

import logging
import os
import tempfile
from pathlib import Path

from src.core.exceptions import UploadFailedError
from src.services.blob.base import BlobStorage

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    """Stores objects under a root directory.

    Writes go to a temp file in the destination directory and are moved
    into place with ``os.replace``, so a reader sees either the whole
    file or no file.

    Args:
        root_dir: Directory holding all objects.
        public_base_url: Base URL of the API serving ``/files/{key}``.
    """

    def __init__(self, root_dir: str | Path, public_base_url: str) -> None:
        self._root = Path(root_dir).resolve()
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, key: str) -> Path:
        """Map a key to a path inside the root, rejecting traversal.

        Raises:
            ValueError: If the key escapes the storage root.
        """
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            raise ValueError(f"Key outside storage root: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            dest = self.resolve(key)
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=".upload-", suffix=".part")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, dest)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, ValueError) as exc:
            logger.exception("Local blob write failed for %s", key)
            raise UploadFailedError(f"Failed to store '{key}': {exc}") from exc

        logger.info("Stored %s (%d bytes, %s)", key, len(data), content_type)
        return f"{self._public_base_url}/files/{key}"
