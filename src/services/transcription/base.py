"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the service layer. Providers receive
a durable URL rather than bytes: the audio has already been uploaded.
"""

from abc import ABC, abstractmethod

from src.core.models import SpeechResult


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio_url: str, **kwargs) -> SpeechResult:
        """Transcribe the audio stored at *audio_url*.

        Args:
            audio_url: Fetchable URL of the uploaded audio.
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            SpeechResult with the transcript text and detected language.

        Raises:
            TranscriptionFailedError: If the remote service fails.
        """

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
