"""Frame sources and the tick driver."""

from .audio_providers import WavFileInput
from .tuner_driver import TunerDriver

__all__ = ["WavFileInput", "TunerDriver"]
