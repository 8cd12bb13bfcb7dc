"""
Pydantic v2 domain, request and response models used across the app.

The HTTP boundary speaks camelCase (``audioUrl``, ``durationSeconds``);
internal code uses the snake_case attribute names.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


class AudioArtifact(BaseModel):
    """Encoded audio captured from the microphone or picked from disk.

    Immutable; owned by the client session until uploaded.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str
    filename: str
    duration_seconds: float | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class StoredAudioReference(BaseModel):
    """Durable URL pointing at uploaded audio bytes."""

    model_config = ConfigDict(frozen=True)

    url: str


class UploadResponse(BaseModel):
    """POST /uploads response."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    key: str
    content_type: str = Field(alias="contentType")
    size: int


# ---------------------------------------------------------------------------
# Speech-to-text
# ---------------------------------------------------------------------------


class SpeechResult(BaseModel):
    """Raw output of a speech-to-text provider."""

    text: str
    language: str = "unknown"


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionRequest(BaseModel):
    """POST /transcriptions request body."""

    model_config = ConfigDict(populate_by_name=True)

    audio_url: str = Field(alias="audioUrl", pattern=r"^https?://\S+$")
    language: str | None = None  # falls back to settings.default_language
    duration_seconds: float = Field(alias="durationSeconds", ge=1)


class AudioTrack(BaseModel):
    """Source audio metadata attached to a transcription."""

    file_url: str
    partial_transcription: str
    language: str


class TranscriptionResult(BaseModel):
    """Service output: transcript plus generated title, before persistence."""

    title: str
    full_transcription: str
    audio_tracks: list[AudioTrack] = Field(default_factory=list)


class TranscriptionCreateResponse(BaseModel):
    """POST /transcriptions response: the new record's identifier."""

    id: str


class AudioTrackResponse(BaseModel):
    """Audio track as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    file_url: str = Field(alias="fileUrl")
    partial_transcription: str = Field(alias="partialTranscription")
    language: str


class TranscriptionResponse(BaseModel):
    """Persisted transcription record as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    title: str
    user_id: str = Field(alias="userId")
    full_transcription: str = Field(alias="fullTranscription")
    audio_tracks: list[AudioTrackResponse] = Field(default_factory=list, alias="audioTracks")
    created_at: datetime = Field(alias="createdAt")


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class SummaryResponse(BaseModel):
    """POST /transcriptions/{id}/summary response."""

    id: str
    summary: str
    keywords: list[str] = Field(default_factory=list)
    topic: str = ""


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------


class RecorderStatus(StrEnum):
    """States of the client-side recording flow."""

    idle = "idle"
    recording = "recording"
    processing = "processing"
    completed = "completed"
