"""
Transcription REST endpoints.

``POST /transcriptions`` runs speech-to-text and title generation on an
uploaded file and persists the result for the calling user. Read
endpoints are scoped to the caller; summaries are computed on demand and
never written back to the record.
"""

import logging

from fastapi import APIRouter, Query
from sqlalchemy.exc import SQLAlchemyError

from src.api.auth import CurrentUser
from src.api.dependencies import SettingsDep, SummarizerDep, TranscriptionServiceDep
from src.core.exceptions import PersistenceFailedError
from src.core.models import (
    AudioTrackResponse,
    StoredAudioReference,
    SummaryResponse,
    TranscriptionCreateResponse,
    TranscriptionRequest,
    TranscriptionResponse,
)
from src.services.storage.database import get_session
from src.services.storage.repository import TranscriptionRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transcriptions", tags=["transcriptions"])


def _to_response(transcription) -> TranscriptionResponse:
    """Convert an ORM Transcription object to its API response model."""
    return TranscriptionResponse(
        id=transcription.id,
        title=transcription.title,
        user_id=transcription.user_id,
        full_transcription=transcription.full_transcription,
        audio_tracks=[
            AudioTrackResponse(
                file_url=track.file_url,
                partial_transcription=track.partial_transcription,
                language=track.language,
            )
            for track in transcription.audio_tracks
        ],
        created_at=transcription.created_at,
    )


@router.post("", response_model=TranscriptionCreateResponse)
async def create_transcription(
    body: TranscriptionRequest,
    user: CurrentUser,
    service: TranscriptionServiceDep,
    settings: SettingsDep,
) -> TranscriptionCreateResponse:
    """Transcribe uploaded audio, generate a title, and save the record."""
    result = await service.transcribe(
        StoredAudioReference(url=body.audio_url),
        language=body.language or settings.default_language or None,
        duration_seconds=body.duration_seconds,
    )
    try:
        async with get_session() as session:
            record_id = await TranscriptionRepository(session).save(user.user_id, result)
    except SQLAlchemyError as exc:
        logger.exception("Commit failed for transcription of %s", body.audio_url)
        raise PersistenceFailedError(detail=f"Failed to save transcription: {exc}") from exc
    return TranscriptionCreateResponse(id=record_id)


@router.get("", response_model=list[TranscriptionResponse])
async def list_transcriptions(
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List the caller's transcriptions, newest first."""
    async with get_session() as session:
        repo = TranscriptionRepository(session)
        transcriptions = await repo.list_transcriptions(user.user_id, limit=limit, offset=offset)
    return [_to_response(t) for t in transcriptions]


@router.get("/{transcription_id}", response_model=TranscriptionResponse)
async def get_transcription(transcription_id: str, user: CurrentUser):
    """Return one of the caller's transcriptions."""
    async with get_session() as session:
        repo = TranscriptionRepository(session)
        transcription = await repo.get_transcription(transcription_id, user.user_id)
    return _to_response(transcription)


@router.post("/{transcription_id}/summary", response_model=SummaryResponse)
async def summarize_transcription(
    transcription_id: str,
    user: CurrentUser,
    summarizer: SummarizerDep,
) -> SummaryResponse:
    """Summarize a stored transcript with the configured LLM."""
    async with get_session() as session:
        repo = TranscriptionRepository(session)
        transcription = await repo.get_transcription(transcription_id, user.user_id)
    return await summarizer.summarize(transcription.id, transcription.full_transcription)
