"""Microphone capture with a strict acquire/release lifecycle.

``AudioCaptureController`` drives one recording at a time through
``idle -> recording -> stopping -> idle``. Chunks delivered by the input
device are buffered in arrival order and assembled into a single WAV
``AudioArtifact`` when the recording stops. The device handle is released
on every exit path: normal stop, ``abort()``, or leaving the ``with`` block.

Usage::

    controller = AudioCaptureController(MicrophoneInput(), on_complete=submit)
    controller.start()
    ...
    artifact = controller.stop()
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum

from src.core.exceptions import RecordingAlreadyActiveError
from src.core.models import AudioArtifact
from src.services.audio.processor import AudioProcessor

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


class CaptureState(StrEnum):
    """Recording lifecycle states."""

    idle = "idle"
    recording = "recording"
    stopping = "stopping"


class AudioInputDevice(ABC):
    """An audio source that pushes raw PCM16 chunks to a callback."""

    sample_rate: int = 16000
    channels: int = 1
    sample_width: int = 2

    @abstractmethod
    def open(self, on_chunk: ChunkCallback) -> None:
        """Acquire the device and start delivering chunks.

        Raises:
            PermissionDeniedError: If the OS or user refuses access.
            DeviceUnavailableError: If there is no usable input device.
        """

    @abstractmethod
    def close(self) -> None:
        """Stop delivering chunks and release the device."""


class AudioCaptureController:
    """Owns the input device and the recording buffer for one session.

    Args:
        device: The input device to record from.
        on_complete: Called exactly once per recording with the finished
            artifact, after the device has been released.
        clock: Returns epoch seconds; used for the artifact filename.
    """

    def __init__(
        self,
        device: AudioInputDevice,
        on_complete: Callable[[AudioArtifact], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._device = device
        self._on_complete = on_complete
        self._clock = clock
        self._processor = AudioProcessor(device.sample_rate, device.sample_width, device.channels)
        self._lock = threading.Lock()
        self._chunks: list[bytes] = []
        self._state = CaptureState.idle
        self._handles = 0

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def acquired_handles(self) -> int:
        """Number of device handles currently held (0 or 1)."""
        return self._handles

    @property
    def is_recording(self) -> bool:
        return self._state == CaptureState.recording

    def _on_chunk(self, chunk: bytes) -> None:
        with self._lock:
            if self._state == CaptureState.recording:
                self._chunks.append(chunk)

    def start(self) -> None:
        """Acquire the microphone and begin buffering chunks.

        Raises:
            RecordingAlreadyActiveError: If a recording is in progress.
            PermissionDeniedError: If microphone access is refused.
            DeviceUnavailableError: If no input device exists.
        """
        with self._lock:
            if self._state != CaptureState.idle:
                raise RecordingAlreadyActiveError()
            self._chunks = []
            self._state = CaptureState.recording

        try:
            self._device.open(self._on_chunk)
        except BaseException:
            with self._lock:
                self._state = CaptureState.idle
            raise

        # abort() may have run while open() was blocked on a permission prompt
        with self._lock:
            aborted = self._state != CaptureState.recording
            if not aborted:
                self._handles += 1
        if aborted:
            try:
                self._device.close()
            except Exception:
                logger.exception("Error while closing audio input device")
            logger.info("Recording aborted before the device finished opening")
            return
        logger.info("Recording started (%d Hz, %d ch)", self._device.sample_rate, self._device.channels)

    def stop(self) -> AudioArtifact | None:
        """Finish the recording and return the assembled artifact.

        Returns None (and does nothing) when no recording is active.
        """
        with self._lock:
            if self._state != CaptureState.recording:
                return None
            self._state = CaptureState.stopping

        try:
            self._release()
            with self._lock:
                pcm = b"".join(self._chunks)
                self._chunks = []
            artifact = AudioArtifact(
                data=self._processor.pcm_to_wav_bytes(pcm),
                mime_type="audio/wav",
                filename=f"recording-{int(self._clock() * 1000)}.wav",
                duration_seconds=self._processor.pcm_duration(pcm),
            )
        finally:
            with self._lock:
                self._chunks = []
                self._state = CaptureState.idle

        logger.info(
            "Recording stopped: %.2fs, %d bytes", artifact.duration_seconds, artifact.size
        )
        if self._on_complete is not None:
            self._on_complete(artifact)
        return artifact

    def abort(self) -> None:
        """Release the device and discard buffered audio without emitting an artifact.

        Does nothing unless recording; a running ``stop()`` releases the
        device itself.
        """
        with self._lock:
            if self._state != CaptureState.recording:
                return
            self._state = CaptureState.stopping
        try:
            self._release()
        finally:
            with self._lock:
                self._chunks = []
                self._state = CaptureState.idle
        logger.info("Recording aborted")

    def _release(self) -> None:
        """Close the device; the handle counts as released even if closing fails."""
        if self._handles == 0:
            return
        try:
            self._device.close()
        except Exception:
            logger.exception("Error while closing audio input device")
        finally:
            self._handles = 0

    def __enter__(self) -> "AudioCaptureController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.abort()
