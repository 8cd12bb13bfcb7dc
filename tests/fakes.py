"""Test doubles shared by capture and recorder-flow tests."""

import threading

from src.services.audio.capture import AudioInputDevice


class FakeInputDevice(AudioInputDevice):
    """In-memory device that records open/close calls and lets tests push chunks.

    ``open_gate``/``close_gate`` make ``open()``/``close()`` block until the
    test sets them; ``opening``/``closing`` are set once the call has begun
    and ``released`` once ``close()`` has finished.
    """

    def __init__(
        self,
        open_error: Exception | None = None,
        close_error: Exception | None = None,
        open_gate: threading.Event | None = None,
        close_gate: threading.Event | None = None,
    ):
        self.open_error = open_error
        self.close_error = close_error
        self.open_gate = open_gate
        self.close_gate = close_gate
        self.opening = threading.Event()
        self.closing = threading.Event()
        self.released = threading.Event()
        self.opened = 0
        self.closed = 0
        self._on_chunk = None

    @property
    def is_open(self) -> bool:
        return self._on_chunk is not None

    def open(self, on_chunk):
        self.opening.set()
        if self.open_gate is not None:
            self.open_gate.wait(timeout=5)
        if self.open_error is not None:
            raise self.open_error
        self.opened += 1
        self._on_chunk = on_chunk

    def close(self):
        self.closing.set()
        if self.close_gate is not None:
            self.close_gate.wait(timeout=5)
        self.closed += 1
        self._on_chunk = None
        self.released.set()
        if self.close_error is not None:
            raise self.close_error

    def emit(self, chunk: bytes) -> None:
        assert self._on_chunk is not None, "device is not open"
        self._on_chunk(chunk)
