"""Audio processing utilities.

Wraps raw PCM frames into WAV containers and measures the duration of
encoded audio artifacts.
"""

import io
import logging
import wave

import soundfile as sf
from pydub import AudioSegment

from src.core.models import AudioArtifact
from src.services.audio.formats import ffmpeg_format

logger = logging.getLogger(__name__)


class AudioProcessor:
    """Handles PCM audio data conversion and analysis.

    Provides utilities for converting raw PCM bytes to WAV containers and
    computing durations for both raw PCM and encoded files.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        """Initialize the audio processor.

        Args:
            sample_rate: Audio sample rate in Hz (default: 16 kHz).
            sample_width: Bytes per sample (2 = 16-bit signed PCM).
            channels: Number of audio channels (1 = mono).
        """
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    @property
    def frame_size(self) -> int:
        return self.sample_width * self.channels

    def pcm_duration(self, pcm_data: bytes) -> float:
        """Duration in seconds of raw PCM bytes."""
        return len(pcm_data) / (self.sample_rate * self.frame_size)

    def pcm_to_wav_bytes(self, pcm_data: bytes) -> bytes:
        """Wrap raw PCM bytes (16-bit) in an in-memory WAV container.

        Args:
            pcm_data: Raw PCM bytes, frame-aligned.

        Returns:
            Complete WAV file as bytes. Empty input yields a valid empty WAV.

        Raises:
            ValueError: If data length is not aligned to sample frame size.
        """
        if len(pcm_data) % self.frame_size != 0:
            raise ValueError(
                f"PCM data length ({len(pcm_data)}) is not aligned to frame size "
                f"({self.frame_size})"
            )
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(self.sample_width)
            wf.setframerate(self.sample_rate)
            wf.writeframes(pcm_data)
        return buf.getvalue()


def measure_duration(artifact: AudioArtifact) -> float:
    """Return the duration of an encoded artifact in seconds.

    Reads only the header via libsndfile when the container allows it
    (WAV, FLAC, OGG, MP3) and falls back to a full pydub/ffmpeg decode
    for containers libsndfile cannot parse (M4A, WebM).

    This is a read-only pass over immutable bytes, so it is safe to run
    concurrently with an upload of the same artifact.

    Raises:
        ValueError: If the bytes cannot be decoded as audio.
    """
    if artifact.duration_seconds is not None:
        return artifact.duration_seconds

    try:
        info = sf.info(io.BytesIO(artifact.data))
        return float(info.duration)
    except sf.LibsndfileError as exc:
        logger.debug("soundfile could not probe %s (%s); decoding with pydub", artifact.filename, exc)

    try:
        segment = AudioSegment.from_file(
            io.BytesIO(artifact.data), format=ffmpeg_format(artifact.filename)
        )
    except Exception as exc:
        raise ValueError(f"Cannot decode audio '{artifact.filename}': {exc}") from exc
    return len(segment) / 1000.0

