"""Reference tone synthesis."""

import numpy as np

# Level the exponential fade ends at
TONE_FLOOR_GAIN = 0.001


def synthesize_tone(
    frequency: float,
    sample_rate: int = 48000,
    duration: float = 2.0,
    gain: float = 0.3,
) -> np.ndarray:
    """Sine wave that fades exponentially from ``gain`` to 0.001.

    Args:
        frequency: Tone frequency in Hz
        sample_rate: Output sample rate in Hz
        duration: Length in seconds
        gain: Initial amplitude (0..1)

    Returns:
        Mono float32 samples
    """
    if frequency <= 0:
        raise ValueError("frequency must be positive")
    if duration <= 0:
        raise ValueError("duration must be positive")
    if not 0.0 < gain <= 1.0:
        raise ValueError("gain must be between 0.0 and 1.0")

    t = np.arange(int(sample_rate * duration)) / sample_rate
    envelope = gain * (TONE_FLOOR_GAIN / gain) ** (t / duration)
    return (envelope * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
