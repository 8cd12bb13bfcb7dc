"""
SQLAlchemy ORM models for the Voxnote schema.

Tables: ``transcriptions``, ``audio_tracks``.
"""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.services.storage.database import Base


class Transcription(Base):
    """A persisted transcript with its generated title."""

    __tablename__ = "transcriptions"
    __table_args__ = (Index("ix_transcriptions_user_created", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(80))
    user_id: Mapped[str] = mapped_column(String(255))
    full_transcription: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    audio_tracks: Mapped[list["AudioTrack"]] = relationship(
        back_populates="transcription",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Transcription id={self.id} user={self.user_id!r}>"


class AudioTrack(Base):
    """Source audio of a transcription and the text recognized in it."""

    __tablename__ = "audio_tracks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    transcription_id: Mapped[str] = mapped_column(
        ForeignKey("transcriptions.id", ondelete="CASCADE"), index=True
    )
    file_url: Mapped[str] = mapped_column(String(2048))
    partial_transcription: Mapped[str] = mapped_column(Text, default="")
    language: Mapped[str] = mapped_column(String(16), default="unknown")

    transcription: Mapped["Transcription"] = relationship(back_populates="audio_tracks")

    def __repr__(self) -> str:
        return f"<AudioTrack id={self.id} transcription={self.transcription_id}>"
