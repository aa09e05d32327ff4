"""Factory for creating fret_tuner components."""

import random
from typing import Optional

from ..logger import get_logger
from ..audio.pitch_estimator import AutocorrelationPitchEstimator
from ..audio.signal_gate import SignalGate
from ..detection.median_stabilizer import MedianStabilizer
from ..detection.deviation_smoother import DeviationSmoother
from ..reference_matcher import ReferenceMatcher
from ..session import TunerSession
from ..services.audio_providers import WavFileInput
from ..services.tuner_driver import TunerDriver
from .config import ConfigManager
from .events import TunerEvents
from .interfaces import IAudioInput, ITonePlayer

logger = get_logger(__name__)


class ComponentFactory:
    """Builds configured components.

    Keyword arguments to every ``create_*`` method override the stored
    configuration for that call only.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def _config(self, name: str, overrides: dict) -> dict:
        config = self.config_manager.get_config(name)
        config.update({k: v for k, v in overrides.items() if v is not None})
        return config

    def create_signal_gate(self, **kwargs) -> SignalGate:
        return SignalGate(**self._config("signal_gate", kwargs))

    def create_pitch_estimator(self, **kwargs) -> AutocorrelationPitchEstimator:
        return AutocorrelationPitchEstimator(**self._config("pitch_estimator", kwargs))

    def create_stabilizer(self, rng: Optional[random.Random] = None, **kwargs) -> MedianStabilizer:
        return MedianStabilizer(rng=rng, **self._config("stabilizer", kwargs))

    def create_matcher(self, **kwargs) -> ReferenceMatcher:
        return ReferenceMatcher(**self._config("matcher", kwargs))

    def create_live_input(self, device_id: Optional[int] = None, **kwargs) -> IAudioInput:
        """Create a sounddevice input.

        Imported here so file analysis works on hosts without PortAudio.
        """
        from ..audio.audio_input import SoundDeviceInput

        config = self._config("audio_input", kwargs)
        instance = SoundDeviceInput(
            device_id=device_id,
            sample_rate=config["sample_rate"],
            frame_size=config["frame_size"],
            block_size=config["block_size"],
            channels=config["channels"],
        )
        logger.info(f"Created live audio input (device {device_id})")
        return instance

    def create_file_input(self, file_path: str, **kwargs) -> WavFileInput:
        config = self._config("audio_input", kwargs)
        instance = WavFileInput(
            file_path,
            frame_size=config["frame_size"],
            hop_size=config.get("hop_size", config["block_size"]),
            gain=config.get("gain", 1.0),
        )
        logger.info(f"Created file audio input: {file_path}")
        return instance

    def create_tone_player(self, device_id: Optional[int] = None, **kwargs) -> ITonePlayer:
        """Create a sounddevice tone player (imported lazily, like the live input)."""
        from ..audio.tone_player import SoundDeviceTonePlayer

        config = self._config("tone", kwargs)
        sample_rate = self.config_manager.get_config("audio_input")["sample_rate"]
        return SoundDeviceTonePlayer(
            device_id=device_id,
            sample_rate=sample_rate,
            duration=config["duration"],
            gain=config["gain"],
        )

    def create_session(
        self,
        audio_input: Optional[IAudioInput] = None,
        tone_player: Optional[ITonePlayer] = None,
        events: Optional[TunerEvents] = None,
        rng: Optional[random.Random] = None,
    ) -> TunerSession:
        """Create a session wired with configured pipeline stages."""
        session = TunerSession(
            audio_input=audio_input,
            tone_player=tone_player,
            estimator=self.create_pitch_estimator(),
            gate=self.create_signal_gate(),
            stabilizer=self.create_stabilizer(rng=rng),
            matcher=self.create_matcher(),
            smoother=DeviationSmoother(),
            events=events,
        )
        logger.info("Created tuner session")
        return session

    def create_driver(self, session: TunerSession, **kwargs) -> TunerDriver:
        config = self._config("driver", kwargs)
        return TunerDriver(session, tick_interval=config["tick_interval"])
