"""
Voxnote exception hierarchy.

All application-specific exceptions inherit from VoxnoteError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class VoxnoteError(Exception):
    """Base exception for all Voxnote errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "VOXNOTE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------


class PermissionDeniedError(VoxnoteError):
    """Raised when microphone access is refused by the user or OS."""

    def __init__(self, detail: str = "Microphone access was denied") -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED", status_code=403)


class DeviceUnavailableError(VoxnoteError):
    """Raised when no audio input device can be opened."""

    def __init__(self, detail: str = "No audio input device available") -> None:
        super().__init__(detail=detail, code="DEVICE_UNAVAILABLE", status_code=503)


class RecordingAlreadyActiveError(VoxnoteError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


class UnsupportedAudioTypeError(VoxnoteError):
    """Raised when a file is not one of the accepted audio types."""

    def __init__(self, filename: str, content_type: str | None = None) -> None:
        shown = f"{filename} ({content_type})" if content_type else filename
        super().__init__(
            detail=f"Unsupported audio file: {shown}",
            code="UNSUPPORTED_AUDIO_TYPE",
            status_code=415,
        )


class UploadFailedError(VoxnoteError):
    """Raised when audio bytes could not be stored in blob storage."""

    def __init__(self, detail: str = "Upload failed") -> None:
        super().__init__(detail=detail, code="UPLOAD_FAILED", status_code=502)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionFailedError(VoxnoteError):
    """Raised when STT fails or the request is invalid (e.g. duration < 1)."""

    def __init__(self, detail: str = "Transcription failed", status_code: int = 502) -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_FAILED", status_code=status_code)


class TitleGenerationFailedError(VoxnoteError):
    """Raised when the LLM title call fails after a successful transcription."""

    def __init__(self, detail: str = "Title generation failed") -> None:
        super().__init__(detail=detail, code="TITLE_GENERATION_FAILED", status_code=502)


class SummarizationError(VoxnoteError):
    """Raised when LLM summarization fails."""

    def __init__(self, detail: str = "Summarization failed") -> None:
        super().__init__(detail=detail, code="SUMMARIZATION_ERROR", status_code=502)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class PersistenceFailedError(VoxnoteError):
    """Raised when a transcription record could not be written."""

    def __init__(self, detail: str = "Failed to save transcription") -> None:
        super().__init__(detail=detail, code="PERSISTENCE_FAILED", status_code=500)


class TranscriptionNotFoundError(VoxnoteError):
    """Raised when a transcription ID does not exist for the caller."""

    def __init__(self, transcription_id: str) -> None:
        super().__init__(
            detail=f"Transcription not found: {transcription_id}",
            code="TRANSCRIPTION_NOT_FOUND",
            status_code=404,
        )


class AuthenticationError(VoxnoteError):
    """Raised when a request carries a missing or unknown bearer token."""

    def __init__(self) -> None:
        super().__init__(detail="Invalid API key", code="AUTH_REQUIRED", status_code=401)
