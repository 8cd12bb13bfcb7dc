"""FastAPI dependency providers for services and storage backends.

Tests replace these through ``app.dependency_overrides``.
"""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends

from src.core.config import Settings, get_settings
from src.services.blob import BlobStorage, create_blob_storage
from src.services.llm import BaseLLM, create_llm
from src.services.summarization import TranscriptSummarizer
from src.services.transcription import create_stt
from src.services.transcription.service import TranscriptionService

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_blob_storage(settings: SettingsDep) -> BlobStorage:
    """Return the configured blob storage backend."""
    return create_blob_storage(settings)


def get_llm(settings: SettingsDep) -> BaseLLM:
    """Return the configured LLM provider."""
    return create_llm(settings.llm_provider)


async def get_transcription_service(
    settings: SettingsDep,
    llm: Annotated[BaseLLM, Depends(get_llm)],
) -> AsyncIterator[TranscriptionService]:
    """Yield a TranscriptionService and close its STT client afterwards."""
    stt = create_stt(settings.stt_provider, settings=settings)
    title_fallback = settings.default_title if settings.title_fallback_on_error else None
    try:
        yield TranscriptionService(stt, llm, title_fallback=title_fallback)
    finally:
        await stt.aclose()


def get_summarizer(llm: Annotated[BaseLLM, Depends(get_llm)]) -> TranscriptSummarizer:
    """Return a summarizer bound to the configured LLM."""
    return TranscriptSummarizer(llm)


BlobStorageDep = Annotated[BlobStorage, Depends(get_blob_storage)]
TranscriptionServiceDep = Annotated[TranscriptionService, Depends(get_transcription_service)]
SummarizerDep = Annotated[TranscriptSummarizer, Depends(get_summarizer)]
