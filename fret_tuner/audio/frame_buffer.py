"""Rolling window over the most recent input samples."""

import threading

import numpy as np


class FrameBuffer:
    """Keeps the latest ``frame_size`` samples of a stream.

    Writers (the audio thread) append blocks of any size; readers get a copy
    of the whole window, oldest sample first. Positions not yet written read
    as silence.
    """

    def __init__(self, frame_size: int = 8192) -> None:
        if frame_size < 1:
            raise ValueError("frame_size must be at least 1")
        self._buffer = np.zeros(frame_size, dtype=np.float32)
        self._filled = 0
        self._lock = threading.Lock()

    def write(self, block: np.ndarray) -> None:
        """Append samples, discarding the oldest ones that no longer fit."""
        block = np.asarray(block, dtype=np.float32).ravel()
        n = len(block)
        if n == 0:
            return
        size = len(self._buffer)
        with self._lock:
            if n >= size:
                self._buffer[:] = block[-size:]
            else:
                self._buffer[:-n] = self._buffer[n:]
                self._buffer[-n:] = block
            self._filled = min(size, self._filled + n)

    def read(self) -> np.ndarray:
        """Copy of the current window."""
        with self._lock:
            return self._buffer.copy()

    def clear(self) -> None:
        with self._lock:
            self._buffer[:] = 0.0
            self._filled = 0

    @property
    def filled(self) -> int:
        """How many real samples the window holds."""
        return self._filled

    @property
    def frame_size(self) -> int:
        return len(self._buffer)
