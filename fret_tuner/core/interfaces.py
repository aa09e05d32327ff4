"""Defines the core interfaces for the fret_tuner application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from ..note_types import AudioFrame


class IAudioInput(ABC):
    """Interface for audio input handlers.

    Implementations hand out the most recent frame of samples on request;
    they never push into the pipeline themselves.
    """

    @abstractmethod
    def start(self) -> None:
        """Acquire the input device.

        Raises:
            AcquisitionError: If the device is unavailable or access is denied
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Release the input device. Safe to call when not running."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @abstractmethod
    def read_frame(self) -> Optional[AudioFrame]:
        """Return the latest frame, or None when no more audio will arrive."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass


class IPitchEstimator(ABC):
    """Interface for single-frame pitch estimation."""

    @abstractmethod
    def estimate(self, frame: AudioFrame) -> Optional[float]:
        """Return the fundamental frequency in Hz, or None if there is no pitch."""
        pass


class ITonePlayer(ABC):
    """Interface for reference tone playback."""

    @abstractmethod
    def play(self, frequency: float) -> None:
        """Start playing a reference tone and return without waiting for it."""
        pass
