"""Shared test doubles and signal generators."""

from typing import List, Optional, Sequence

import numpy as np

from fret_tuner.core.errors import AcquisitionError
from fret_tuner.core.interfaces import IAudioInput, ITonePlayer
from fret_tuner.note_types import AudioFrame

SAMPLE_RATE = 48000
FRAME_SIZE = 8192


def sine(frequency: float, amplitude: float = 0.5, size: int = FRAME_SIZE,
         sample_rate: int = SAMPLE_RATE, phase: float = 0.0) -> np.ndarray:
    t = np.arange(size) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t + phase)).astype(np.float32)


def sine_frame(frequency: float, amplitude: float = 0.5, phase: float = 0.0) -> AudioFrame:
    return AudioFrame(sine(frequency, amplitude, phase=phase), SAMPLE_RATE)


def silent_frame() -> AudioFrame:
    return AudioFrame(np.zeros(FRAME_SIZE, dtype=np.float32), SAMPLE_RATE)


class FixedRandom:
    """Stand-in for random.Random that always draws the same value."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class FakeAudioInput(IAudioInput):
    """Serves a fixed list of frames; can be told to fail acquisition."""

    def __init__(self, frames: Sequence[AudioFrame] = (), fail: bool = False):
        self.frames: List[AudioFrame] = list(frames)
        self.fail = fail
        self.running = False
        self.start_calls = 0
        self.stop_calls = 0
        self.reads = 0

    def start(self) -> None:
        self.start_calls += 1
        if self.fail:
            raise AcquisitionError("device unavailable")
        self.running = True

    def stop(self) -> None:
        self.stop_calls += 1
        self.running = False

    def is_running(self) -> bool:
        return self.running

    def read_frame(self) -> Optional[AudioFrame]:
        self.reads += 1
        if not self.frames:
            return None
        return self.frames.pop(0)

    @property
    def sample_rate(self) -> int:
        return SAMPLE_RATE


class FakeTonePlayer(ITonePlayer):
    def __init__(self, fail: bool = False):
        self.played: List[float] = []
        self.fail = fail

    def play(self, frequency: float) -> None:
        if self.fail:
            raise RuntimeError("no output device")
        self.played.append(frequency)
