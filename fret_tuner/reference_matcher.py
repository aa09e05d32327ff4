"""Matching a stabilized pitch against the reference tuning table."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .logger import get_logger
from .note_types import GuitarString, ModeState, TunerMode
from .note_utils import STANDARD_TUNING, cents_between

# Get logger for this module
logger = get_logger(__name__)

HYSTERESIS_CENTS = 300.0
CLAMP_CENTS = 50.0


@dataclass(frozen=True)
class Match:
    """Outcome of matching one stabilized pitch."""

    active_index: int  # String the deviation is measured against
    detected_index: int  # Nearest string, regardless of mode
    offset_cents: float  # Deviation from the active string, clamped


def clamp_cents(offset: float, limit: float = CLAMP_CENTS) -> float:
    """Limit an offset to the gauge range ``[-limit, limit]``."""
    return max(-limit, min(limit, offset))


def nearest_reference(
    frequency: float, table: Sequence[GuitarString] = STANDARD_TUNING
) -> Tuple[int, float]:
    """Index of the closest string by absolute cents, and the signed offset.

    Ties go to the lower string.
    """
    best_index = -1
    best_cents = float("inf")
    for index, string in enumerate(table):
        diff = cents_between(frequency, string.frequency)
        if abs(diff) < abs(best_cents):
            best_index = index
            best_cents = diff
    return best_index, best_cents


class ReferenceMatcher:
    """
    Encapsulates logic for comparing a stabilized pitch to the tuning table,
    including the Auto-mode hysteresis that keeps the previously tracked
    string while the pitch stays within reach of it.
    """

    def __init__(
        self,
        table: Sequence[GuitarString] = STANDARD_TUNING,
        hysteresis_cents: float = HYSTERESIS_CENTS,
        clamp_cents: float = CLAMP_CENTS,
    ) -> None:
        if not table:
            raise ValueError("Reference table must not be empty")
        self._table = tuple(table)
        self._hysteresis_cents = hysteresis_cents
        self._clamp_cents = clamp_cents

    @property
    def table(self) -> Tuple[GuitarString, ...]:
        return self._table

    def match_manual(self, frequency: float, locked_index: int) -> Match:
        """Measure against the locked string, whatever is nearest."""
        detected_index, _ = nearest_reference(frequency, self._table)
        offset = cents_between(frequency, self._table[locked_index].frequency)
        return Match(
            active_index=locked_index,
            detected_index=detected_index,
            offset_cents=clamp_cents(offset, self._clamp_cents),
        )

    def match_auto(self, frequency: float, previous_index: Optional[int]) -> Match:
        """Measure against the nearest string unless the previous one still fits."""
        detected_index, nearest_offset = nearest_reference(frequency, self._table)
        active_index, offset = detected_index, nearest_offset

        if previous_index is not None and previous_index != detected_index:
            offset_to_previous = cents_between(
                frequency, self._table[previous_index].frequency
            )
            if abs(offset_to_previous) < self._hysteresis_cents:
                logger.debug(
                    f"Holding {self._table[previous_index].label} "
                    f"({offset_to_previous:+.1f} cents) over nearest "
                    f"{self._table[detected_index].label}"
                )
                active_index, offset = previous_index, offset_to_previous

        return Match(
            active_index=active_index,
            detected_index=detected_index,
            offset_cents=clamp_cents(offset, self._clamp_cents),
        )

    def match(self, frequency: float, state: ModeState) -> Optional[Match]:
        """Match a pitch under the session's current mode.

        Returns:
            The match, or None when the session is idle
        """
        if state.mode is TunerMode.MANUAL and state.locked_index is not None:
            return self.match_manual(frequency, state.locked_index)
        if state.mode is TunerMode.AUTO:
            return self.match_auto(frequency, state.locked_index)
        return None
