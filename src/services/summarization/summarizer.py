"""
Transcript summarization.

Optional post-processing on a stored transcription: the configured LLM
produces a JSON summary with keywords and a topic label. The stored
record itself is never modified.
"""

import json
import logging

from src.core.exceptions import SummarizationError
from src.core.models import SummaryResponse
from src.core.utils import strip_code_fences
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class TranscriptSummarizer:
    """Summarizes full transcripts using an LLM provider."""

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    async def summarize(self, transcription_id: str, transcript: str) -> SummaryResponse:
        """Summarize one transcript.

        Args:
            transcription_id: ID of the record being summarized (echoed back).
            transcript: The full transcript text.

        Returns:
            SummaryResponse with summary text, keywords and topic.

        Raises:
            SummarizationError: If the LLM fails or returns invalid JSON.
        """
        if not transcript.strip():
            return SummaryResponse(id=transcription_id, summary="")

        try:
            raw_response = await self._llm.summarize(transcript)
        except Exception as exc:
            raise SummarizationError(
                detail=f"LLM call failed for transcription {transcription_id}: {exc}"
            ) from exc

        raw_response = strip_code_fences(raw_response)
        try:
            data = json.loads(raw_response)
        except json.JSONDecodeError as exc:
            raise SummarizationError(
                detail=f"Invalid JSON from LLM: {raw_response[:200]}"
            ) from exc
        if not isinstance(data, dict):
            raise SummarizationError(detail=f"Unexpected LLM output: {raw_response[:200]}")

        keywords = [str(k) for k in data.get("keywords", []) if k]
        logger.info("Summarized transcription %s (%d keywords)", transcription_id, len(keywords))
        return SummaryResponse(
            id=transcription_id,
            summary=str(data.get("summary", "")),
            keywords=keywords,
            topic=str(data.get("topic", "")),
        )
