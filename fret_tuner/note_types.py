"""Type definitions for the fret_tuner project."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class TunerMode(Enum):
    """Target-selection policy of a tuning session."""

    IDLE = "idle"
    AUTO = "auto"
    MANUAL = "manual"


class TunerStatus(Enum):
    """Acquisition status of a tuning session."""

    INACTIVE = "inactive"
    LISTENING = "listening"
    ERROR = "error"


@dataclass(frozen=True)
class GuitarString:
    """One entry of the reference tuning table."""

    note: str  # Note name without octave (e.g., 'E')
    octave: int  # e.g. 2
    frequency: float  # Target frequency in Hz
    label: str  # Display label (e.g., 'E2')

    def __str__(self):
        return self.label


@dataclass
class AudioFrame:
    """A block of normalized samples (-1..1) and the rate they were taken at."""

    samples: np.ndarray
    sample_rate: int = 48000

    def __len__(self):
        return len(self.samples)


@dataclass(frozen=True)
class NoteReading:
    """Absolute (chromatic) note name for a frequency."""

    note_name: str  # Note name (e.g., 'A', 'C#')
    octave: int  # Scientific pitch octave (A4 = 440 Hz)
    frequency: float  # Frequency that was named, in Hz
    cents_off: int  # Floor of the deviation from perfect_frequency, in cents
    perfect_frequency: float  # Equal-tempered frequency of the named note

    def __str__(self):
        return f"{self.note_name}{self.octave}"


@dataclass(frozen=True)
class FrameResult:
    """Everything a display needs after one pipeline pass."""

    volume: float = 0.0  # UI-scaled level, 0..1
    stabilized_frequency: Optional[float] = None  # Median of recent estimates, Hz
    active_reference_index: Optional[int] = None  # String being tuned against
    detected_reference_index: Optional[int] = None  # Nearest string, display only
    smoothed_cents_offset: float = 0.0  # Needle position, -50..50
    note: Optional[NoteReading] = None  # Absolute note of the stabilized pitch
    pitch_detected: bool = False  # Whether this frame produced an estimate
    mode: TunerMode = TunerMode.IDLE
    gauge_active: bool = False  # Listening and loud enough to show the needle
    off_target: bool = False  # Manual lock differs from the detected string
    target_label: str = ""


@dataclass(frozen=True)
class ModeState:
    """Mode of a session plus the reference index it is locked to.

    ``locked_index`` is the manual lock in MANUAL, the previously matched
    string in AUTO, and a preserved manual lock while IDLE.
    """

    mode: TunerMode = TunerMode.IDLE
    locked_index: Optional[int] = None


@dataclass(frozen=True)
class Transition:
    """Result of a mode command: the next state and the effects it requests."""

    state: ModeState
    acquire: bool = False  # Session must acquire the audio input
    release: bool = False  # Session must release the audio input
    reset_tracking: bool = False  # Clear stabilizer window and smoothing
    clear_detected: bool = False  # Forget the detected string
    tone_index: Optional[int] = None  # Reference tone to request, if any
