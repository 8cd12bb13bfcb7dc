"""
Transcribe-and-title service.

Runs the two dependent remote calls behind ``POST /transcriptions``:
speech-to-text on the uploaded audio, then title generation seeded from
the transcript. The title call never starts before the transcript exists,
and never starts at all if transcription failed.
"""

import logging

from src.core.exceptions import TitleGenerationFailedError, TranscriptionFailedError
from src.core.models import AudioTrack, StoredAudioReference, TranscriptionResult
from src.services.llm.base import BaseLLM
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

MIN_DURATION_SECONDS = 1
TITLE_MAX_LENGTH = 80
TITLE_MAX_TOKENS = 10

TITLE_PROMPT_TEMPLATE = (
    "Write a short, descriptive title for the following transcript. "
    "Reply with the title only, no quotes or punctuation at the end.\n\n"
    "Transcript:\n{transcript}"
)

_QUOTE_CHARS = "\"'`“”‘’«»"


def truncate_title(title: str, limit: int = TITLE_MAX_LENGTH) -> str:
    """Trim whitespace and wrapping quotes, then cut to *limit* characters.

    Slicing a ``str`` counts code points, so multi-byte text is never
    split mid-character.
    """
    cleaned = title.strip().strip(_QUOTE_CHARS).strip()
    return cleaned[:limit].rstrip()


class TranscriptionService:
    """Turns a stored audio reference into a titled transcript.

    Args:
        stt: Speech-to-text provider.
        llm: LLM provider used for the title.
        title_fallback: Title to use when title generation fails. None
            (the default) makes a title failure fail the whole operation.
    """

    def __init__(
        self,
        stt: BaseSTT,
        llm: BaseLLM,
        title_fallback: str | None = None,
    ) -> None:
        self._stt = stt
        self._llm = llm
        self._title_fallback = title_fallback

    async def generate_title(self, transcript: str) -> str:
        """Ask the LLM for a title (max 10 tokens) and truncate it to 80 characters.

        Raises:
            TitleGenerationFailedError: If the LLM call fails and no fallback is set.
        """
        prompt = TITLE_PROMPT_TEMPLATE.format(transcript=transcript)
        try:
            raw = await self._llm.generate(prompt, max_tokens=TITLE_MAX_TOKENS, temperature=0.2)
        except Exception as exc:
            if self._title_fallback is None:
                raise TitleGenerationFailedError(detail=f"Title generation failed: {exc}") from exc
            logger.warning("Title generation failed, using fallback title: %s", exc)
            return truncate_title(self._title_fallback)

        title = truncate_title(raw)
        if not title and self._title_fallback is not None:
            return truncate_title(self._title_fallback)
        return title

    async def transcribe(
        self,
        audio: StoredAudioReference,
        language: str | None,
        duration_seconds: float,
    ) -> TranscriptionResult:
        """Transcribe stored audio and generate its title.

        Args:
            audio: Durable reference to the uploaded audio.
            language: Optional ISO 639-1 hint; None lets the model detect it.
            duration_seconds: Measured audio duration; must be at least 1.

        Returns:
            TranscriptionResult ready to be persisted.

        Raises:
            TranscriptionFailedError: If the duration is below 1 second or STT fails.
            TitleGenerationFailedError: If the title call fails and no fallback is set.
        """
        if duration_seconds < MIN_DURATION_SECONDS:
            raise TranscriptionFailedError(
                detail=f"Audio must be at least {MIN_DURATION_SECONDS} second long "
                f"(got {duration_seconds})",
                status_code=422,
            )

        try:
            speech = await self._stt.transcribe(audio.url, language=language)
        except TranscriptionFailedError:
            raise
        except Exception as exc:
            raise TranscriptionFailedError(detail=f"Transcription failed: {exc}") from exc

        logger.info(
            "Transcribed %s (%.1fs, %d chars)", audio.url, duration_seconds, len(speech.text)
        )

        title = await self.generate_title(speech.text)
        return TranscriptionResult(
            title=title,
            full_transcription=speech.text,
            audio_tracks=[
                AudioTrack(
                    file_url=audio.url,
                    partial_transcription=speech.text,
                    language=language or speech.language,
                )
            ],
        )
