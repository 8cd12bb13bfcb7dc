"""Shared pytest fixtures for the Voxnote test suite.

Provides mock LLM/STT providers, an in-memory SQLite database, and
generated PCM/WAV audio used across unit and integration tests.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock

import pytest

from src.core.models import SpeechResult

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider for unit testing.

    ``generate`` returns a title, ``summarize`` returns summary JSON.
    """
    from src.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = "Hello World Greeting"
    llm.summarize.return_value = (
        '{"summary": "A short greeting.", "keywords": ["hello", "world"], "topic": "greeting"}'
    )
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider returning ``"hello world"``."""
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = SpeechResult(text="hello world", language="en")
    return stt


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1.5 seconds of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono)."""
    sample_rate = 16000
    amplitude = 16000
    samples = [
        struct.pack("<h", int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate)))
        for i in range(int(sample_rate * 1.5))
    ]
    return b"".join(samples)


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The sample PCM wrapped in a WAV container."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()


@pytest.fixture
def sample_audio_path(tmp_path, sample_wav_bytes):
    """Write the sample WAV to a temporary file and return its path."""
    wav_path = tmp_path / "meeting.wav"
    wav_path.write_bytes(sample_wav_bytes)
    return wav_path


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from src.services.storage import models_db  # noqa: F401
    from src.services.storage.database import Base

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Return a TranscriptionRepository bound to the test session."""
    from src.services.storage.repository import TranscriptionRepository

    return TranscriptionRepository(db_session)
