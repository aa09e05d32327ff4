"""Reference tone playback through sounddevice."""

from typing import Optional

import sounddevice as sd

from ..logger import get_logger
from ..core.interfaces import ITonePlayer
from .tone import synthesize_tone

logger = get_logger(__name__)


class SoundDeviceTonePlayer(ITonePlayer):
    """Plays a fading sine on the default (or given) output device.

    ``sd.play`` returns immediately; a new tone replaces one still playing.
    """

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: int = 48000,
        duration: float = 2.0,
        gain: float = 0.3,
    ) -> None:
        self._device_id = device_id
        self._sample_rate = sample_rate
        self._duration = duration
        self._gain = gain

    def play(self, frequency: float) -> None:
        tone = synthesize_tone(
            frequency,
            sample_rate=self._sample_rate,
            duration=self._duration,
            gain=self._gain,
        )
        try:
            sd.play(tone, samplerate=self._sample_rate, device=self._device_id)
        except (sd.PortAudioError, ValueError) as e:
            logger.warning(f"Could not play reference tone at {frequency:.2f}Hz: {e}")
            return
        logger.info(f"Playing reference tone {frequency:.2f}Hz for {self._duration:.1f}s")

    def stop(self) -> None:
        """Cut a tone that is still playing."""
        sd.stop()
