"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Voxnote application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Which LLM backend generates titles and summaries ("claude" or "ollama").
        stt_provider: Hosted speech-to-text backend ("replicate").
        storage_provider: Blob storage backend ("local" or "minio").
        database_url: Async SQLAlchemy connection string.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    # Selects the LLM backend: "claude" for Anthropic API, "ollama" for local models
    llm_provider: str = "claude"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # Title generation
    title_fallback_on_error: bool = False  # True = persist with default_title when the LLM fails
    default_title: str = "Untitled transcription"

    # --- Speech-to-text ---
    # Hosted Whisper on Replicate
    stt_provider: str = "replicate"
    replicate_api_token: str = ""
    replicate_base_url: str = "https://api.replicate.com/v1"
    whisper_model_version: str = "8099696689d249cf8b122d833c36ac3f75505c666a395ca40ef26f68e7d3d16e"
    stt_timeout_seconds: float = 300.0  # Give up (and cancel the prediction) after this long
    stt_poll_interval: float = 1.0
    default_language: str = "en"  # ISO 639-1 code used when the request omits one; empty = auto-detect

    # --- Auth ---
    # Maps bearer tokens to user ids. Empty = every request acts as default_user_id.
    auth_tokens: dict[str, str] = Field(default_factory=dict)
    default_user_id: str = "local-user"

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    public_base_url: str = "http://localhost:8000"  # Used to build fetchable upload URLs
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:8501"]
    )

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/voxnote.db"
    storage_provider: str = "local"
    uploads_dir: str = "data/uploads"  # Blob root for the local backend
    max_upload_mb: int = 64

    # MinIO / S3-compatible blob storage
    minio_endpoint: str = "localhost:9000"
    minio_access_key: str = ""
    minio_secret_key: str = ""
    minio_bucket: str = "voxnote-audio"
    minio_secure: bool = False
    minio_public_url: str = ""  # Empty = hand out presigned GET URLs

    # --- Client ---
    api_base_url: str = "http://localhost:8000"  # Backend URL used by the recorder client
    api_token: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
