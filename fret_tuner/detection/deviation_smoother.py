"""Adaptive exponential smoothing of the tuning deviation."""

from ..logger import get_logger

logger = get_logger(__name__)


def smoothing_factor(offset_cents: float) -> float:
    """Pick the filter gain for a raw offset.

    Near-perfect readings move the needle very slowly so it visibly locks;
    large errors are followed quickly.
    """
    magnitude = abs(offset_cents)
    if magnitude < 1.0:
        return 0.02
    if magnitude < 5.0:
        return 0.05
    if magnitude > 20.0:
        return 0.3
    return 0.1


class DeviationSmoother:
    """Single-pole filter driving the cents needle."""

    def __init__(self) -> None:
        self._value = 0.0

    def update(self, offset_cents: float) -> float:
        """Move towards ``offset_cents`` and return the new needle position."""
        self._value += (offset_cents - self._value) * smoothing_factor(offset_cents)
        return self._value

    def reset(self) -> None:
        self._value = 0.0

    @property
    def value(self) -> float:
        return self._value
