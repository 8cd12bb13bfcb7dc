"""
Async HTTP client for the Voxnote backend API.

Uses ``httpx.AsyncClient`` so the recorder flow can await uploads and
transcription requests without blocking, and so cancelling the calling
task aborts the in-flight request.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.models import AudioArtifact, StoredAudioReference

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``code`` carries the server's error code for "http" errors.
    """

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.category = category
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin async wrapper around httpx for calling the FastAPI backend.

    All methods return parsed models or dicts, or raise ``APIError``.

    Args:
        base_url: Backend URL (falls back to ``settings.api_base_url``).
        token: Bearer token sent with every request (falls back to
            ``settings.api_token``; empty means no Authorization header).
        client: Optional pre-built ``httpx.AsyncClient`` (used in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        token = token if token is not None else settings.api_token
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url, headers=headers, timeout=30.0
        )
        if client is not None and headers:
            self._client.headers.update(headers)

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                f"Backend server is not reachable at {self._base_url}",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            code = None
            try:
                body = exc.response.json()
                detail = body.get("detail", exc.response.text)
                code = body.get("code")
            except (ValueError, AttributeError):
                detail = exc.response.text or str(exc)
            raise APIError(
                str(detail),
                category="http",
                code=code,
                status_code=exc.response.status_code,
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    async def health_check(self) -> dict:
        return (await self._request("GET", "/health")).json()

    # -- uploads --

    async def upload_audio(self, artifact: AudioArtifact) -> StoredAudioReference:
        """Store the artifact's bytes and return their durable URL."""
        resp = await self._request(
            "POST",
            "/api/v1/uploads",
            files={"file": (artifact.filename, artifact.data, artifact.mime_type)},
            timeout=120.0,
        )
        body = resp.json()
        logger.info("Uploaded %s -> %s", artifact.filename, body["url"])
        return StoredAudioReference(url=body["url"])

    # -- transcriptions --

    async def transcribe(
        self,
        audio: StoredAudioReference,
        language: str | None,
        duration_seconds: float,
    ) -> str:
        """Request transcription of uploaded audio and return the new record id."""
        body: dict = {"audioUrl": audio.url, "durationSeconds": duration_seconds}
        if language:
            body["language"] = language
        resp = await self._request(
            "POST", "/api/v1/transcriptions", json=body, timeout=360.0
        )
        return resp.json()["id"]

    async def list_transcriptions(self, limit: int = 50, offset: int = 0) -> list[dict]:
        params = {"limit": limit, "offset": offset}
        return (await self._request("GET", "/api/v1/transcriptions", params=params)).json()

    async def get_transcription(self, transcription_id: str) -> dict:
        return (await self._request("GET", f"/api/v1/transcriptions/{transcription_id}")).json()

    async def summarize(self, transcription_id: str) -> dict:
        return (
            await self._request(
                "POST", f"/api/v1/transcriptions/{transcription_id}/summary", timeout=120.0
            )
        ).json()
