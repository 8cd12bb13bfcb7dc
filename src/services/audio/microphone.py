"""Default system microphone via PortAudio (``sounddevice``)."""

import logging

import sounddevice as sd

from src.core.exceptions import DeviceUnavailableError, PermissionDeniedError
from src.services.audio.capture import AudioInputDevice, ChunkCallback

logger = logging.getLogger(__name__)


class MicrophoneInput(AudioInputDevice):
    """Pushes PCM16 blocks from a PortAudio input stream.

    Args:
        sample_rate: Capture rate in Hz (16 kHz suits Whisper).
        channels: Number of channels (1 = mono).
        blocksize: Frames per callback; 0 lets PortAudio choose.
        device: Optional device index or name; None = system default.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        blocksize: int = 0,
        device: int | str | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = 2
        self._blocksize = blocksize
        self._device = device
        self._stream: sd.RawInputStream | None = None

    def open(self, on_chunk: ChunkCallback) -> None:
        try:
            sd.query_devices(self._device, kind="input")
        except (ValueError, sd.PortAudioError) as exc:
            raise DeviceUnavailableError(f"No audio input device available: {exc}") from exc

        def _callback(indata, _frames, _time_info, status) -> None:
            if status:
                logger.debug("Input stream status: %s", status)
            on_chunk(bytes(indata))

        stream = None
        try:
            stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="int16",
                blocksize=self._blocksize,
                device=self._device,
                callback=_callback,
            )
            stream.start()
        except PermissionError as exc:
            self._close_quietly(stream)
            raise PermissionDeniedError() from exc
        except sd.PortAudioError as exc:
            self._close_quietly(stream)
            message = str(exc).lower()
            if "permission" in message or "access" in message:
                raise PermissionDeniedError() from exc
            raise DeviceUnavailableError(f"Failed to open audio input: {exc}") from exc
        self._stream = stream

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()

    @staticmethod
    def _close_quietly(stream: sd.RawInputStream | None) -> None:
        if stream is None:
            return
        try:
            stream.close()
        except sd.PortAudioError:
            logger.warning("Failed to close half-opened input stream", exc_info=True)
