"""
Audio upload endpoint.

Validates the file type and size, then stores the bytes in blob storage
and returns the durable URL the transcription request will reference.
"""

import asyncio
import logging

from fastapi import APIRouter, UploadFile

from src.api.auth import CurrentUser
from src.api.dependencies import BlobStorageDep, SettingsDep
from src.core.exceptions import VoxnoteError
from src.core.models import UploadResponse
from src.services.audio.formats import validate_upload
from src.services.blob import make_object_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("", response_model=UploadResponse)
async def upload_audio(
    file: UploadFile,
    storage: BlobStorageDep,
    settings: SettingsDep,
    user: CurrentUser,
) -> UploadResponse:
    """Store an audio file and return its URL."""
    filename = file.filename or ""
    content_type = validate_upload(filename, file.content_type)

    limit = settings.max_upload_mb * 1024 * 1024
    if file.size is not None and file.size > limit:
        raise VoxnoteError(
            detail=f"File exceeds {settings.max_upload_mb} MB",
            code="UPLOAD_TOO_LARGE",
            status_code=413,
        )
    data = await file.read()
    if not data:
        raise VoxnoteError(detail="Uploaded file is empty", code="EMPTY_UPLOAD", status_code=400)
    if len(data) > limit:
        raise VoxnoteError(
            detail=f"File exceeds {settings.max_upload_mb} MB",
            code="UPLOAD_TOO_LARGE",
            status_code=413,
        )

    key = make_object_key(filename)
    logger.info(
        "Upload from %s: %s -> %s (%d bytes)", user.user_id, filename, key, len(data)
    )
    url = await asyncio.to_thread(storage.put, key, data, content_type)
    return UploadResponse(url=url, key=key, content_type=content_type, size=len(data))
