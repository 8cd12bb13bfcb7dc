"""
Storage module - Database persistence of transcription records.
"""

from src.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from src.services.storage.models_db import AudioTrack, Transcription
from src.services.storage.repository import TranscriptionRepository

__all__ = [
    "AudioTrack",
    "Base",
    "Transcription",
    "TranscriptionRepository",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]
