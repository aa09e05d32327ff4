"""Bounded autocorrelation pitch estimation."""

from __future__ import annotations
import math
from typing import ClassVar, Optional, TypeAlias

import numpy as np

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IPitchEstimator
from .signal_gate import compute_rms

logger = get_logger(__name__)


def autocorrelate(samples: np.ndarray, max_lag: int) -> np.ndarray:
    """Unnormalized autocorrelation for lags ``0 .. max_lag - 1``.

    ``C[lag] = sum(x[i] * x[i + lag])`` over the overlapping part of the
    block. Computed through a zero-padded FFT so the cost does not grow with
    ``max_lag``.
    """
    x = np.asarray(samples, dtype=np.float64)
    size = len(x)
    max_lag = min(max_lag, size)
    if max_lag <= 0:
        return np.zeros(0, dtype=np.float64)

    # Pad to at least 2N so the circular correlation equals the linear one
    n_fft = 1 << (2 * size - 1).bit_length()
    spectrum = np.fft.rfft(x, n=n_fft)
    correlations = np.fft.irfft(spectrum * np.conj(spectrum), n=n_fft)
    return correlations[:max_lag]


def find_first_dip(correlations: np.ndarray) -> int:
    """Index where the zero-lag peak stops strictly decreasing."""
    d = 0
    last = len(correlations) - 1
    while d < last and correlations[d] > correlations[d + 1]:
        d += 1
    return d


def refine_peak(correlations: np.ndarray, peak: int) -> float:
    """Sub-sample position of a peak by parabolic interpolation.

    Returns the integer position unchanged when the peak sits on either edge
    of the array or its neighbourhood is flat (zero curvature).
    """
    if peak <= 0 or peak >= len(correlations) - 1:
        return float(peak)

    left = correlations[peak - 1]
    centre = correlations[peak]
    right = correlations[peak + 1]
    denominator = left - 2 * centre + right
    if denominator == 0:
        return float(peak)

    delta = -(right - left) / (2 * denominator)
    return peak + float(delta)


class AutocorrelationPitchEstimator(IPitchEstimator):
    """Monophonic pitch estimator for guitar-range signals.

    The lag search is bounded to the period of ``min_frequency`` so a full
    8192-sample frame is analysed in a few milliseconds.
    """

    # Type aliases
    Frequency: TypeAlias = float

    MIN_RMS: ClassVar[float] = 0.03  # Inner noise gate on raw RMS
    MIN_FREQUENCY: ClassVar[Frequency] = 50.0  # Hz - bounds the lag search
    MIN_CORRELATION: ClassVar[float] = 0.85  # Peak / zero-lag ratio to accept

    def __init__(
        self,
        min_rms: float = MIN_RMS,
        min_frequency: float = MIN_FREQUENCY,
        min_correlation: float = MIN_CORRELATION,
    ) -> None:
        """Initialize the estimator.

        Args:
            min_rms: Frames quieter than this (raw RMS) are not analysed
            min_frequency: Lowest detectable fundamental in Hz
            min_correlation: Minimum C[T0] / C[0] for a periodic frame
        """
        if min_frequency <= 0:
            raise ValueError("min_frequency must be positive")
        if not 0.0 < min_correlation <= 1.0:
            raise ValueError("min_correlation must be between 0.0 and 1.0")
        self._min_rms = min_rms
        self._min_frequency = min_frequency
        self._min_correlation = min_correlation

    def max_lag(self, sample_rate: int) -> int:
        """Number of lags searched at this sample rate."""
        return int(math.floor(sample_rate / self._min_frequency))

    def estimate(self, frame: AudioFrame) -> Optional[Frequency]:
        """Estimate the fundamental frequency of one frame.

        Args:
            frame: Samples and sample rate

        Returns:
            Frequency in Hz, or None when the frame is too quiet or not
            periodic enough
        """
        samples = frame.samples
        rms = compute_rms(samples)
        if rms < self._min_rms:
            logger.debug(f"Below inner gate: rms={rms:.4f}")
            return None

        correlations = autocorrelate(samples, self.max_lag(frame.sample_rate))
        if len(correlations) < 2 or correlations[0] <= 0:
            return None

        dip = find_first_dip(correlations)
        period = dip + int(np.argmax(correlations[dip:]))

        clarity = correlations[period] / correlations[0]
        if clarity < self._min_correlation:
            logger.debug(f"Rejected: clarity {clarity:.3f} at lag {period}")
            return None

        refined = refine_peak(correlations, period)
        if refined <= 0:
            return None

        frequency = frame.sample_rate / refined
        logger.debug(
            f"Estimate {frequency:.3f}Hz (lag {period} -> {refined:.3f}, "
            f"clarity {clarity:.3f}, rms {rms:.4f})"
        )
        return frequency

    @property
    def min_frequency(self) -> float:
        """Get the lowest detectable frequency."""
        return self._min_frequency

    @property
    def min_correlation(self) -> float:
        """Get the confidence threshold."""
        return self._min_correlation
