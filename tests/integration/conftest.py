"""Integration test fixtures for Voxnote.

Provides an app wired to mock STT/LLM providers, local blob storage in a
temporary directory, and an in-memory SQLite database with real
repository operations.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.dependencies import get_summarizer, get_transcription_service
from src.core.config import Settings, get_settings
from src.services.storage import database
from src.services.summarization import TranscriptSummarizer
from src.services.transcription.service import TranscriptionService


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing blob storage at a temp dir and serving it from http://test."""
    return Settings(
        storage_provider="local",
        uploads_dir=str(tmp_path / "uploads"),
        public_base_url="http://test",
        auth_tokens={},
    )


@pytest.fixture
def app(test_settings, mock_stt, mock_llm):
    """Create a fresh FastAPI application with mocked remote providers."""
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: test_settings
    application.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(
        mock_stt, mock_llm
    )
    application.dependency_overrides[get_summarizer] = lambda: TranscriptSummarizer(mock_llm)
    return application


@pytest.fixture
async def async_client(app, db_engine):
    """AsyncClient backed by the in-memory test engine.

    Injects the test engine into the database module so that all routes
    use the same in-memory SQLite with tables already created.
    """
    database._engine = db_engine
    database._session_factory = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    database.reset_engine()
