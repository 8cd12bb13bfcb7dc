"""Hosted Whisper STT on Replicate.

Creates a prediction for a fixed model version with ``Prefer: wait`` and
polls it until it reaches a terminal state. Predictions still running
when the timeout expires, or when the calling task is cancelled, are
cancelled remotely so no orphaned work keeps billing.
"""

import asyncio
import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings
from src.core.exceptions import TranscriptionFailedError
from src.core.models import SpeechResult
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_TERMINAL_STATES = frozenset({"succeeded", "failed", "canceled"})


class ReplicateSTT(BaseSTT):
    """Speech-to-text provider backed by a Replicate-hosted Whisper model.

    Args:
        api_token: Replicate API token (falls back to settings).
        model_version: Model version hash to run.
        base_url: Replicate API root.
        timeout: Seconds to wait for a prediction before cancelling it.
        poll_interval: Seconds between status polls.
        client: Optional pre-built ``httpx.AsyncClient`` (used in tests).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        api_token: str | None = None,
        model_version: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        poll_interval: float | None = None,
        client: httpx.AsyncClient | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_token = api_token or self._settings.replicate_api_token
        self._model_version = model_version or self._settings.whisper_model_version
        self._base_url = (base_url or self._settings.replicate_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else self._settings.stt_timeout_seconds
        self._poll_interval = (
            poll_interval if poll_interval is not None else self._settings.stt_poll_interval
        )
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_token}"},
            timeout=httpx.Timeout(90.0, connect=10.0),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _create_prediction(self, audio_url: str, language: str | None) -> dict:
        """POST a new prediction. Not retried: a retry could start a second billed run."""
        payload = {
            "version": self._model_version,
            "input": {
                "audio": audio_url,
                "language": language or "auto",
                "transcription": "plain text",
                "translate": False,
            },
        }
        response = await self._client.post(
            f"{self._base_url}/predictions",
            json=payload,
            headers={"Prefer": "wait"},
        )
        response.raise_for_status()
        return response.json()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get_prediction(self, url: str) -> dict:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.json()

    async def _cancel_prediction(self, prediction: dict) -> None:
        cancel_url = prediction.get("urls", {}).get("cancel")
        if not cancel_url:
            return
        try:
            await self._client.post(cancel_url)
            logger.info("Cancelled Replicate prediction %s", prediction.get("id"))
        except httpx.HTTPError:
            logger.warning("Failed to cancel prediction %s", prediction.get("id"), exc_info=True)

    async def _wait_for(self, prediction: dict) -> dict:
        """Poll until the prediction reaches a terminal state."""
        while prediction.get("status") not in _TERMINAL_STATES:
            await asyncio.sleep(self._poll_interval)
            prediction = await self._get_prediction(prediction["urls"]["get"])
        return prediction

    @staticmethod
    def _parse_output(output: dict | str, language: str | None) -> SpeechResult:
        """Convert Whisper's prediction output into a SpeechResult."""
        if isinstance(output, str):
            return SpeechResult(text=output.strip(), language=language or "unknown")

        text = (output.get("transcription") or "").strip()
        if not text:
            pieces = (seg.get("text", "").strip() for seg in output.get("segments") or [])
            text = " ".join(piece for piece in pieces if piece)
        return SpeechResult(
            text=text,
            language=language or output.get("detected_language") or "unknown",
        )

    async def transcribe(self, audio_url: str, **kwargs) -> SpeechResult:
        """Transcribe the audio at *audio_url*.

        Args:
            audio_url: Durable URL of the uploaded audio.
            **kwargs: Optional key: language (ISO 639-1 code; None = auto-detect).

        Returns:
            SpeechResult with transcript and language.

        Raises:
            TranscriptionFailedError: On HTTP errors, timeouts, or a failed prediction.
        """
        language = kwargs.get("language")
        prediction: dict | None = None
        try:
            prediction = await self._create_prediction(audio_url, language)
            logger.info(
                "Replicate prediction %s created (status=%s)",
                prediction.get("id"),
                prediction.get("status"),
            )
            async with asyncio.timeout(self._timeout):
                prediction = await self._wait_for(prediction)
        except TimeoutError as exc:
            await self._cancel_prediction(prediction or {})
            raise TranscriptionFailedError(
                detail=f"Transcription timed out after {self._timeout:.0f}s"
            ) from exc
        except asyncio.CancelledError:
            if prediction is not None:
                await self._cancel_prediction(prediction)
            raise
        except httpx.HTTPError as exc:
            logger.warning("Replicate request failed: %s", exc)
            raise TranscriptionFailedError(detail=f"Replicate request failed: {exc}") from exc

        status = prediction.get("status")
        if status != "succeeded":
            raise TranscriptionFailedError(
                detail=f"Prediction {prediction.get('id')} {status}: {prediction.get('error')}"
            )
        return self._parse_output(prediction.get("output") or {}, language)
