import random
from collections import deque
from typing import Deque, List, Optional

from ..logger import get_logger

logger = get_logger(__name__)


class MedianStabilizer:
    """
    Median filter over the last few raw pitch estimates.

    A single octave jump or glitch inside the window never reaches the
    output, and a short dropout does not reset the window.
    """

    def __init__(
        self,
        window_size: int = 8,
        eviction_probability: float = 0.1,
        rng: Optional[random.Random] = None,
    ):
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        if not 0.0 <= eviction_probability <= 1.0:
            raise ValueError("eviction_probability must be between 0.0 and 1.0")
        self._window_size = window_size
        self._eviction_probability = eviction_probability
        self._rng = rng or random.Random()
        self._history: Deque[float] = deque()

    def add(self, frequency: float) -> float:
        """Push a valid estimate and return the new stabilized pitch."""
        self._history.append(frequency)
        if len(self._history) > self._window_size:
            self._history.popleft()
        return self.median()

    def median(self) -> Optional[float]:
        """Element ``len // 2`` of the sorted window, or None if empty."""
        if not self._history:
            return None
        ordered = sorted(self._history)
        return ordered[len(ordered) // 2]

    def on_silence(self) -> bool:
        """Maybe forget the oldest estimate after a gated-out frame.

        Returns:
            True if an entry was evicted
        """
        if self._history and self._rng.random() < self._eviction_probability:
            dropped = self._history.popleft()
            logger.debug(f"Silence: evicted {dropped:.2f}Hz, {len(self._history)} left")
            return True
        return False

    def reset(self) -> None:
        self._history.clear()

    @property
    def window(self) -> List[float]:
        """Copy of the current window, oldest first."""
        return list(self._history)

    @property
    def window_size(self) -> int:
        return self._window_size

    def __len__(self) -> int:
        return len(self._history)
