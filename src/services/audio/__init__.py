"""
Audio module - Capture lifecycle, accepted formats and duration measurement.

``MicrophoneInput`` lives in ``src.services.audio.microphone`` so that
importing this package does not require the PortAudio library.
"""

from .capture import AudioCaptureController, AudioInputDevice, CaptureState
from .processor import AudioProcessor, measure_duration

__all__ = [
    "AudioCaptureController",
    "AudioInputDevice",
    "AudioProcessor",
    "CaptureState",
    "measure_duration",
]
