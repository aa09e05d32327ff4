"""Real-time guitar tuner: pitch estimation and string matching."""

from .note_types import (
    AudioFrame,
    FrameResult,
    GuitarString,
    NoteReading,
    TunerMode,
    TunerStatus,
)
from .note_utils import STANDARD_TUNING, cents_between, get_note_from_frequency
from .session import TunerSession
from .core.errors import AcquisitionError, TunerError

__version__ = "0.1.0"

__all__ = [
    "AudioFrame",
    "FrameResult",
    "GuitarString",
    "NoteReading",
    "TunerMode",
    "TunerStatus",
    "STANDARD_TUNING",
    "cents_between",
    "get_note_from_frequency",
    "TunerSession",
    "AcquisitionError",
    "TunerError",
]
