"""Utility functions for working with musical notes and frequencies."""

import math
from typing import List, Tuple

from .logger import get_logger
from .note_types import GuitarString, NoteReading

# Get logger for this module
logger = get_logger(__name__)

# Standard reference: A4 = 440Hz, MIDI note 69
A4_FREQ = 440.0
A4_MIDI = 69

NOTE_STRINGS: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

# Standard six-string tuning, lowest (6th string) first
STANDARD_TUNING: Tuple[GuitarString, ...] = (
    GuitarString(note="E", octave=2, frequency=82.41, label="E2"),
    GuitarString(note="A", octave=2, frequency=110.00, label="A2"),
    GuitarString(note="D", octave=3, frequency=146.83, label="D3"),
    GuitarString(note="G", octave=3, frequency=196.00, label="G3"),
    GuitarString(note="B", octave=3, frequency=246.94, label="B3"),
    GuitarString(note="E", octave=4, frequency=329.63, label="E4"),
)


def cents_between(frequency: float, reference: float) -> float:
    """Signed distance from ``reference`` to ``frequency`` in cents.

    1200 cents is one octave; positive means sharp.
    """
    return 1200.0 * math.log2(frequency / reference)


def get_note_from_frequency(frequency: float) -> NoteReading:
    """Name the equal-tempered note closest to a frequency.

    Args:
        frequency: Frequency in Hz, must be positive

    Returns:
        NoteReading with the note name, SPN octave, the floored cents
        deviation and the perfect frequency of the named note

    Raises:
        ValueError: If frequency is not positive

    Note:
        - Middle C is C4 (261.63 Hz)
        - cents_off is truncated toward negative infinity, so a pitch a hair
          flat of A4 reads -1, not 0
    """
    if not frequency > 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")

    note_number = 12 * math.log2(frequency / A4_FREQ) + A4_MIDI
    # Half rounds up
    rounded = math.floor(note_number + 0.5)
    perfect_frequency = A4_FREQ * 2 ** ((rounded - A4_MIDI) / 12)
    cents_off = math.floor(1200 * math.log2(frequency / perfect_frequency))

    # SPN octave calculation (C4 is middle C)
    octave = (rounded // 12) - 1
    note_name = NOTE_STRINGS[rounded % 12]

    return NoteReading(
        note_name=note_name,
        octave=octave,
        frequency=frequency,
        cents_off=cents_off,
        perfect_frequency=perfect_frequency,
    )


def get_note_name(freq: float) -> str:
    """Convert frequency to a note name using Scientific Pitch Notation (SPN).

    Returns:
        Note name with octave (e.g., 'A4', 'C#4'), or '---' for a
        non-positive frequency
    """
    if freq <= 0:
        return "---"
    return str(get_note_from_frequency(freq))
