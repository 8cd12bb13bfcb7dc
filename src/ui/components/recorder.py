"""
Recorder component: the full record/upload state machine.

States: idle -> recording -> processing -> completed

Stopping a recording (or selecting/dropping a file) starts one chain:
duration measurement and upload run side by side on the same artifact,
then the transcription request, then ``navigate(record_id)``. Any failure
along the chain ends in a single generic notification and the idle state.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from src.core.exceptions import UnsupportedAudioTypeError
from src.core.models import AudioArtifact, RecorderStatus
from src.services.audio import AudioCaptureController, measure_duration
from src.services.audio.formats import extension_of, is_drop_accepted, mime_for_extension
from src.ui.api_client import APIClient

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to transcribe audio. Please try again."


class RecorderFlow:
    """Drives capture, upload and transcription for one user session.

    Args:
        controller: Capture controller owned by this session.
        client: Backend API client.
        navigate: Called with the new record id once it is saved.
        notify: Called with a user-facing message when the chain fails.
        language: Optional ISO 639-1 hint sent with every request.
        measure: Duration probe; runs in a worker thread.
    """

    def __init__(
        self,
        controller: AudioCaptureController,
        client: APIClient,
        navigate: Callable[[str], None],
        notify: Callable[[str], None],
        language: str | None = None,
        measure: Callable[[AudioArtifact], float] = measure_duration,
    ) -> None:
        self._controller = controller
        self._client = client
        self._navigate = navigate
        self._notify = notify
        self._language = language
        self._measure = measure
        self._status = RecorderStatus.idle
        self._task: asyncio.Task | None = None
        self._record_id: str | None = None

    @property
    def status(self) -> RecorderStatus:
        return self._status

    @property
    def record_id(self) -> str | None:
        """Id of the last saved transcription, set once ``completed``."""
        return self._record_id

    # -- events --

    async def on_start(self) -> None:
        """Open the microphone and begin recording.

        Ignored unless the flow is idle or completed. ``cancel()`` while the
        device is still opening releases it as soon as opening finishes.
        """
        if self._status not in (RecorderStatus.idle, RecorderStatus.completed):
            logger.warning("Start ignored while %s", self._status)
            return
        self._record_id = None
        self._status = RecorderStatus.recording
        self._task = asyncio.current_task()
        opening = asyncio.ensure_future(asyncio.to_thread(self._controller.start))
        try:
            await asyncio.shield(opening)
        except asyncio.CancelledError:
            opening.add_done_callback(self._release_after_start)
            raise
        except Exception as exc:
            logger.warning("Could not start recording: %s", exc)
            self._fail()
        finally:
            self._clear_task()

    async def on_stop(self) -> str | None:
        """Stop recording and submit the captured audio.

        Returns the new record id, or None if nothing was recorded or the
        chain failed.
        """
        if self._status != RecorderStatus.recording:
            return None
        self._status = RecorderStatus.processing
        self._task = asyncio.current_task()
        try:
            artifact = await asyncio.to_thread(self._controller.stop)
        except Exception as exc:
            logger.warning("Could not finish recording: %s", exc)
            self._clear_task()
            self._fail()
            return None
        except asyncio.CancelledError:
            self._clear_task()
            raise
        if artifact is None:
            self._clear_task()
            self._status = RecorderStatus.idle
            return None
        return await self._submit(artifact)

    async def on_file_selected(self, path: str | Path) -> str | None:
        """Submit an audio file picked from disk.

        Raises:
            UnsupportedAudioTypeError: If the file is not MP3, WAV or M4A.
        """
        path = Path(path)
        if not is_drop_accepted(path.name):
            raise UnsupportedAudioTypeError(path.name)
        if self._status not in (RecorderStatus.idle, RecorderStatus.completed):
            logger.warning("File %s ignored while %s", path.name, self._status)
            return None

        self._record_id = None
        self._status = RecorderStatus.processing
        self._task = asyncio.current_task()
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            self._clear_task()
            self._fail()
            return None
        except asyncio.CancelledError:
            self._clear_task()
            raise
        artifact = AudioArtifact(
            data=data,
            mime_type=mime_for_extension(extension_of(path.name)),
            filename=path.name,
        )
        return await self._submit(artifact)

    async def on_drop(self, paths: Iterable[str | Path]) -> str | None:
        """Submit the first accepted file among dropped paths.

        Raises:
            UnsupportedAudioTypeError: If none of the dropped files is accepted.
        """
        paths = [Path(p) for p in paths]
        if not paths:
            return None
        accepted = [p for p in paths if is_drop_accepted(p.name)]
        for rejected in (p for p in paths if p not in accepted):
            logger.info("Rejected dropped file %s", rejected.name)
        if not accepted:
            raise UnsupportedAudioTypeError(paths[0].name)
        return await self.on_file_selected(accepted[0])

    def cancel(self) -> None:
        """Abort the in-flight chain and release the microphone.

        A record that was already saved stays saved.
        """
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self._controller.abort()
        if self._status != RecorderStatus.completed:
            self._status = RecorderStatus.idle

    def reset(self) -> None:
        """Return to idle, ready for the next recording."""
        if self._status in (RecorderStatus.recording, RecorderStatus.processing):
            self.cancel()
        self._record_id = None
        self._status = RecorderStatus.idle

    # -- chain --

    async def _submit(self, artifact: AudioArtifact) -> str | None:
        self._status = RecorderStatus.processing
        try:
            async with asyncio.TaskGroup() as tg:
                duration = tg.create_task(asyncio.to_thread(self._measure, artifact))
                stored = tg.create_task(self._client.upload_audio(artifact))
            record_id = await self._client.transcribe(
                stored.result(), self._language, duration.result()
            )
        except asyncio.CancelledError:
            logger.info("Transcription of %s cancelled", artifact.filename)
            self._controller.abort()
            self._status = RecorderStatus.idle
            raise
        except Exception as exc:
            logger.warning("Transcription of %s failed: %r", artifact.filename, exc)
            self._fail()
            return None
        finally:
            self._clear_task()

        self._record_id = record_id
        self._status = RecorderStatus.completed
        logger.info("Transcription %s saved", record_id)
        self._navigate(record_id)
        return record_id

    def _clear_task(self) -> None:
        if self._task is asyncio.current_task():
            self._task = None

    def _release_after_start(self, opening: asyncio.Future) -> None:
        """Close a microphone that finished opening after its start was cancelled."""
        if not opening.cancelled() and opening.exception() is None:
            self._controller.abort()

    def _fail(self) -> None:
        self._controller.abort()
        self._status = RecorderStatus.idle
        self._notify(FAILURE_MESSAGE)
