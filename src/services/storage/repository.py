"""
Data-access layer for transcription records.

``TranscriptionRepository`` receives an ``AsyncSession`` and calls
``flush()`` rather than ``commit()`` so that transaction boundaries are
controlled by the caller (typically :func:`get_session`).
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import PersistenceFailedError, TranscriptionNotFoundError
from src.core.models import TranscriptionResult
from src.core.utils import new_record_id
from src.services.storage.models_db import AudioTrack, Transcription

logger = logging.getLogger(__name__)


class TranscriptionRepository:
    """Reads and writes transcriptions together with their audio tracks.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, user_id: str, result: TranscriptionResult) -> str:
        """Insert a transcription and its tracks under a fresh ID.

        Every call creates a new record; saving the same result twice
        yields two IDs.

        Args:
            user_id: Owner of the record (from the request's auth context).
            result: Transcript, title and track metadata to store.

        Returns:
            The new record ID.

        Raises:
            PersistenceFailedError: If the insert fails.
        """
        record_id = new_record_id()
        transcription = Transcription(
            id=record_id,
            title=result.title,
            user_id=user_id,
            full_transcription=result.full_transcription,
            audio_tracks=[
                AudioTrack(
                    id=new_record_id(),
                    file_url=track.file_url,
                    partial_transcription=track.partial_transcription,
                    language=track.language,
                )
                for track in result.audio_tracks
            ],
        )
        self._session.add(transcription)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            logger.exception("Failed to insert transcription for user %s", user_id)
            raise PersistenceFailedError(detail=f"Failed to save transcription: {exc}") from exc

        logger.info("Saved transcription %s for user %s", record_id, user_id)
        return record_id

    async def get_transcription(self, transcription_id: str, user_id: str) -> Transcription:
        """Return a user's transcription or raise :class:`TranscriptionNotFoundError`."""
        stmt = select(Transcription).where(
            Transcription.id == transcription_id,
            Transcription.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        transcription = result.scalar_one_or_none()
        if transcription is None:
            raise TranscriptionNotFoundError(transcription_id)
        return transcription

    async def list_transcriptions(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Transcription]:
        """Return a user's transcriptions, newest first."""
        stmt = (
            select(Transcription)
            .where(Transcription.user_id == user_id)
            .order_by(Transcription.created_at.desc(), Transcription.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
