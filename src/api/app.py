"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn src.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import register_error_handlers
from src.api.routes import files, transcriptions, uploads
from src.core.config import get_settings
from src.core.models import HealthResponse
from src.services.storage.database import close_db, init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables on startup and dispose the DB engine on shutdown."""
    await init_db()
    yield
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Voxnote",
        description="Record or upload audio, transcribe it, and keep titled transcripts.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(uploads.router, prefix="/api/v1")
    app.include_router(transcriptions.router, prefix="/api/v1")

    # -- Local blob downloads --
    app.include_router(files.router)

    return app


app = create_app()


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run("src.api.app:app", host=settings.app_host, port=settings.app_port)
