"""Core components for the fret_tuner application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    IPitchEstimator,
    ITonePlayer,
)
from .errors import TunerError, AcquisitionError

__all__ = [
    "IAudioInput",
    "IPitchEstimator",
    "ITonePlayer",
    "TunerError",
    "AcquisitionError",
]
