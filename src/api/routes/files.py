"""
Serves blobs written by the local storage backend.

The hosted STT service fetches uploaded audio from these URLs, so the
route is public; keys are random and unguessable.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from src.api.dependencies import BlobStorageDep
from src.core.exceptions import VoxnoteError
from src.services.audio.formats import extension_of, mime_for_extension
from src.services.blob.local import LocalBlobStorage

router = APIRouter(prefix="/files", tags=["files"])


def _not_found(key: str) -> VoxnoteError:
    return VoxnoteError(detail=f"File not found: {key}", code="FILE_NOT_FOUND", status_code=404)


@router.get("/{key:path}")
async def get_file(key: str, storage: BlobStorageDep) -> FileResponse:
    """Stream a stored audio file."""
    if not isinstance(storage, LocalBlobStorage):
        raise _not_found(key)
    try:
        path = storage.resolve(key)
    except ValueError:
        raise _not_found(key) from None
    if not path.is_file():
        raise _not_found(key)
    return FileResponse(
        path,
        media_type=mime_for_extension(extension_of(path.name)) or "application/octet-stream",
    )
