"""Live audio input through sounddevice."""

from __future__ import annotations
import numpy as np
import sounddevice as sd
from typing import Optional, Dict, Any, List, Tuple, ClassVar

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.errors import AcquisitionError
from ..core.interfaces import IAudioInput
from .frame_buffer import FrameBuffer

logger = get_logger(__name__)

# Substrings identifying dedicated instrument interfaces
GUITAR_ADAPTER_NAMES = ("rocksmith", "guitar")


def find_guitar_adapter() -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find a guitar USB adapter in the system's audio devices.

    Returns:
        (device_id, device_info) of the first match, or (None, None)
    """
    try:
        devices = sd.query_devices()
    except sd.PortAudioError as e:
        logger.error(f"Error listing audio devices: {e}")
        return None, None

    for device_id, device in enumerate(devices):
        name = device["name"].lower()
        if device["max_input_channels"] > 0 and any(
            key in name for key in GUITAR_ADAPTER_NAMES
        ):
            logger.info(f"Found guitar adapter: {device['name']}")
            return device_id, device
    return None, None


def list_input_devices(
    rates: Tuple[int, ...] = (44100, 48000, 96000)
) -> List[Dict[str, Any]]:
    """Describe every device with input channels and the rates it accepts."""
    result = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] <= 0:
            continue
        supported = []
        for rate in rates:
            try:
                sd.check_input_settings(device=device_id, samplerate=rate, channels=1)
                supported.append(rate)
            except (sd.PortAudioError, ValueError):
                continue
        result.append(
            {
                "id": device_id,
                "name": device["name"],
                "channels": device["max_input_channels"],
                "default_samplerate": device["default_samplerate"],
                "supported_rates": supported,
            }
        )
    return result


class SoundDeviceInput(IAudioInput):
    """Audio input handler using sounddevice library.

    The stream callback only copies samples into a ``FrameBuffer``; the tick
    thread reads the latest full frame with ``read_frame``.
    """

    # Stream defaults
    SAMPLE_RATE: ClassVar[int] = 48000  # Hz
    FRAME_SIZE: ClassVar[int] = 8192  # Samples analysed per frame
    BLOCK_SIZE: ClassVar[int] = 1024  # Samples delivered per callback
    CHANNELS: ClassVar[int] = 1
    FALLBACK_RATES: ClassVar[Tuple[int, ...]] = (48000, 44100)

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        block_size: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Configure the stream; nothing is opened until ``start``.

        Args:
            device_id: PortAudio device index, or None to look for a guitar adapter
            sample_rate: Sample rate in Hz, or None for default (48000)
            frame_size: Samples per analysed frame, or None for default (8192)
            block_size: Samples per stream callback, or None for default (1024)
            channels: Channels to open (only the first is analysed), or None for 1
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._block_size = block_size or self.BLOCK_SIZE
        self._channels = channels or self.CHANNELS
        self._buffer = FrameBuffer(frame_size or self.FRAME_SIZE)

        self._stream: Optional[sd.InputStream] = None
        self._running = False

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Copy one block from the stream into the frame buffer.

        Note:
            Runs on the PortAudio thread: no logging beyond status flags and
            no work other than the copy.
        """
        if status:
            logger.warning(f"Input stream status: {status}")

        # First channel only
        audio_data = indata[:, 0] if indata.ndim > 1 else indata
        self._buffer.write(audio_data)

    def start(self) -> None:
        """Open and start the input stream.

        Tries the requested sample rate first, then the common fallbacks.

        Raises:
            AcquisitionError: If no rate works with the device
        """
        if self._running:
            logger.warning("Input stream already open")
            return

        if self._device_id is None:
            self._device_id, _ = find_guitar_adapter()

        rates = [self._sample_rate] + [
            r for r in self.FALLBACK_RATES if r != self._sample_rate
        ]
        last_error: Optional[Exception] = None
        for rate in rates:
            try:
                logger.debug(f"Opening input stream at {rate} Hz")
                self._stream = sd.InputStream(
                    device=self._device_id,
                    samplerate=rate,
                    blocksize=self._block_size,
                    channels=self._channels,
                    dtype="float32",
                    callback=self._audio_callback,
                )
                self._stream.start()
            except (sd.PortAudioError, ValueError, OSError) as e:
                last_error = e
                logger.warning(
                    f"Input stream rejected {rate} Hz: {e}"
                )
                self._close_stream()
                continue

            self._sample_rate = rate
            self._buffer.clear()
            self._running = True
            logger.info(f"Input stream open at {rate} Hz")
            return

        raise AcquisitionError(
            f"Could not open audio input device {self._device_id}: {last_error}"
        ) from last_error

    def _close_stream(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.close()
        except sd.PortAudioError as e:
            logger.warning(f"Error closing audio stream: {e}")
        self._stream = None

    def stop(self) -> None:
        """Close the stream and drop buffered samples."""
        if not self._running:
            return

        self._running = False
        try:
            if self._stream is not None:
                self._stream.stop()
        except sd.PortAudioError as e:
            logger.error(f"Could not stop input stream: {e}")
        finally:
            self._close_stream()
            self._buffer.clear()
        logger.info("Input stream closed")

    def is_running(self) -> bool:
        """Check if audio input is running."""
        return self._running

    def read_frame(self) -> Optional[AudioFrame]:
        """Latest ``frame_size`` samples, or None once stopped."""
        if not self._running:
            return None
        return AudioFrame(self._buffer.read(), self._sample_rate)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate
