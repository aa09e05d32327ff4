"""Energy measurement and silence gating."""

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


def compute_rms(samples: np.ndarray) -> float:
    """Root-mean-square level of a block of samples (0.0 for an empty block)."""
    if len(samples) == 0:
        return 0.0
    samples = np.asarray(samples, dtype=np.float64)
    return float(np.sqrt(np.mean(samples**2)))


class SignalGate:
    """Outer noise gate on a UI-scaled volume metric.

    The volume shown to the user is ``min(rms * volume_scale, 1)``; the rest
    of the pipeline only runs for frames whose volume exceeds the threshold.
    """

    def __init__(self, volume_scale: float = 8.0, volume_threshold: float = 0.05):
        if volume_scale <= 0:
            raise ValueError("volume_scale must be positive")
        if not 0.0 <= volume_threshold < 1.0:
            raise ValueError("volume_threshold must be between 0.0 and 1.0")
        self._volume_scale = volume_scale
        self._volume_threshold = volume_threshold

    def measure(self, samples: np.ndarray) -> float:
        """Return the display volume (0..1) of a block of samples."""
        return min(compute_rms(samples) * self._volume_scale, 1.0)

    def is_open(self, volume: float) -> bool:
        """Whether a frame at this volume should be analysed."""
        return volume > self._volume_threshold

    @property
    def volume_threshold(self) -> float:
        return self._volume_threshold
