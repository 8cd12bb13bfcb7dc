"""Integration tests for REST API endpoints with real in-memory SQLite."""

import pytest

from src.core.config import Settings, get_settings
from src.core.exceptions import TranscriptionFailedError

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


class TestUploads:
    async def test_upload_then_download(self, async_client, sample_wav_bytes):
        resp = await async_client.post(
            "/api/v1/uploads", files={"file": ("meeting.wav", sample_wav_bytes, "audio/wav")}
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["contentType"] == "audio/wav"
        assert body["size"] == len(sample_wav_bytes)
        assert body["url"] == f"http://test/files/{body['key']}"

        download = await async_client.get(f"/files/{body['key']}")
        assert download.status_code == 200
        assert download.content == sample_wav_bytes
        assert download.headers["content-type"].startswith("audio/wav")

    async def test_unsupported_type_rejected(self, async_client):
        resp = await async_client.post(
            "/api/v1/uploads", files={"file": ("report.pdf", b"%PDF", "application/pdf")}
        )

        assert resp.status_code == 415
        assert resp.json()["code"] == "UNSUPPORTED_AUDIO_TYPE"

    async def test_empty_file_rejected(self, async_client):
        resp = await async_client.post(
            "/api/v1/uploads", files={"file": ("empty.wav", b"", "audio/wav")}
        )
        assert resp.status_code == 400

    async def test_too_large_rejected(self, app, async_client, tmp_path):
        app.dependency_overrides[get_settings] = lambda: Settings(
            uploads_dir=str(tmp_path), max_upload_mb=0
        )
        resp = await async_client.post(
            "/api/v1/uploads", files={"file": ("a.wav", b"RIFF", "audio/wav")}
        )
        assert resp.status_code == 413

    async def test_missing_file_is_validation_error(self, async_client):
        resp = await async_client.post("/api/v1/uploads")
        assert resp.status_code == 422
        assert resp.json()["code"] == "VALIDATION_ERROR"

    async def test_unknown_file_404(self, async_client):
        resp = await async_client.get("/files/2024/01/01/missing.wav")
        assert resp.status_code == 404

    async def test_traversal_404(self, async_client):
        resp = await async_client.get("/files/..%2F..%2Fetc%2Fpasswd")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Transcriptions
# ---------------------------------------------------------------------------


class TestTranscriptions:
    async def test_create_then_read(self, async_client, mock_stt, mock_llm):
        resp = await async_client.post(
            "/api/v1/transcriptions",
            json={"audioUrl": "https://s3/x.webm", "language": "en", "durationSeconds": 5},
        )

        assert resp.status_code == 200
        record_id = resp.json()["id"]

        resp = await async_client.get(f"/api/v1/transcriptions/{record_id}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == record_id
        assert body["title"] == "Hello World Greeting"
        assert body["fullTranscription"] == "hello world"
        assert body["userId"] == "local-user"
        assert body["audioTracks"] == [
            {"fileUrl": "https://s3/x.webm", "partialTranscription": "hello world", "language": "en"}
        ]
        assert "createdAt" in body

    @pytest.mark.parametrize(
        ("default_language", "expected"), [("fr", "fr"), ("", None)], ids=["fr", "auto"]
    )
    async def test_omitted_language_uses_configured_default(
        self, app, async_client, test_settings, mock_stt, default_language, expected
    ):
        settings = test_settings.model_copy(update={"default_language": default_language})
        app.dependency_overrides[get_settings] = lambda: settings

        resp = await async_client.post(
            "/api/v1/transcriptions",
            json={"audioUrl": "https://s3/x.webm", "durationSeconds": 5},
        )

        assert resp.status_code == 200
        mock_stt.transcribe.assert_awaited_once_with("https://s3/x.webm", language=expected)

    async def test_same_request_twice_creates_two_records(self, async_client):
        payload = {"audioUrl": "https://s3/x.webm", "durationSeconds": 5}
        first = (await async_client.post("/api/v1/transcriptions", json=payload)).json()["id"]
        second = (await async_client.post("/api/v1/transcriptions", json=payload)).json()["id"]

        assert first != second
        listing = (await async_client.get("/api/v1/transcriptions")).json()
        assert {r["id"] for r in listing} == {first, second}

    @pytest.mark.parametrize(
        "payload",
        [
            {"audioUrl": "https://s3/x.webm", "durationSeconds": 0.5},
            {"audioUrl": "ftp://s3/x.webm", "durationSeconds": 5},
            {"durationSeconds": 5},
            {"audioUrl": "https://s3/x.webm"},
        ],
        ids=["short", "scheme", "no-url", "no-duration"],
    )
    async def test_invalid_request_makes_no_remote_call(
        self, async_client, mock_stt, mock_llm, payload
    ):
        resp = await async_client.post("/api/v1/transcriptions", json=payload)

        assert resp.status_code == 422
        assert resp.json()["code"] == "VALIDATION_ERROR"
        mock_stt.transcribe.assert_not_called()
        mock_llm.generate.assert_not_called()

    async def test_stt_failure_persists_nothing(self, async_client, mock_stt, mock_llm):
        mock_stt.transcribe.side_effect = TranscriptionFailedError("Prediction p1 failed")

        resp = await async_client.post(
            "/api/v1/transcriptions", json={"audioUrl": "https://s3/x.webm", "durationSeconds": 5}
        )

        assert resp.status_code == 502
        assert resp.json()["code"] == "TRANSCRIPTION_FAILED"
        mock_llm.generate.assert_not_called()
        assert (await async_client.get("/api/v1/transcriptions")).json() == []

    async def test_title_failure_persists_nothing(self, async_client, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("Claude API error (529)")

        resp = await async_client.post(
            "/api/v1/transcriptions", json={"audioUrl": "https://s3/x.webm", "durationSeconds": 5}
        )

        assert resp.status_code == 502
        assert resp.json()["code"] == "TITLE_GENERATION_FAILED"
        assert (await async_client.get("/api/v1/transcriptions")).json() == []

    async def test_unknown_id_404(self, async_client):
        resp = await async_client.get("/api/v1/transcriptions/nope")
        assert resp.status_code == 404
        assert resp.json()["code"] == "TRANSCRIPTION_NOT_FOUND"

    async def test_summary_not_persisted(self, async_client, mock_llm):
        record_id = (
            await async_client.post(
                "/api/v1/transcriptions",
                json={"audioUrl": "https://s3/x.webm", "durationSeconds": 5},
            )
        ).json()["id"]

        resp = await async_client.post(f"/api/v1/transcriptions/{record_id}/summary")

        assert resp.status_code == 200
        assert resp.json() == {
            "id": record_id,
            "summary": "A short greeting.",
            "keywords": ["hello", "world"],
            "topic": "greeting",
        }
        record = (await async_client.get(f"/api/v1/transcriptions/{record_id}")).json()
        assert record["title"] == "Hello World Greeting"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class TestAuth:
    @pytest.fixture
    def secured(self, app, tmp_path):
        settings = Settings(
            uploads_dir=str(tmp_path), auth_tokens={"tok-alice": "alice", "tok-bob": "bob"}
        )
        app.dependency_overrides[get_settings] = lambda: settings
        return app

    async def test_missing_token_401(self, secured, async_client):
        resp = await async_client.get("/api/v1/transcriptions")

        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    async def test_records_scoped_to_owner(self, secured, async_client):
        alice = {"Authorization": "Bearer tok-alice"}
        bob = {"Authorization": "Bearer tok-bob"}
        record_id = (
            await async_client.post(
                "/api/v1/transcriptions",
                json={"audioUrl": "https://s3/x.webm", "durationSeconds": 5},
                headers=alice,
            )
        ).json()["id"]

        own = await async_client.get(f"/api/v1/transcriptions/{record_id}", headers=alice)
        other = await async_client.get(f"/api/v1/transcriptions/{record_id}", headers=bob)

        assert own.json()["userId"] == "alice"
        assert other.status_code == 404
        assert (await async_client.get("/api/v1/transcriptions", headers=bob)).json() == []
