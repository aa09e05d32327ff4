import soundfile as sf
from typing import Optional

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.errors import AcquisitionError
from ..core.interfaces import IAudioInput
from ..audio.frame_buffer import FrameBuffer

logger = get_logger(__name__)


class WavFileInput(IAudioInput):
    """Provides audio frames by reading through a sound file.

    Every ``read_frame`` advances the file by ``hop_size`` samples and
    returns the latest ``frame_size`` samples, the same sliding window a
    live input exposes. Only the first channel is used.
    """

    def __init__(
        self,
        file_path: str,
        frame_size: int = 8192,
        hop_size: int = 1024,
        gain: float = 1.0,
        loop: bool = False,
    ):
        if hop_size < 1:
            raise ValueError("hop_size must be at least 1")
        self._file_path = file_path
        self._hop_size = hop_size
        self._gain = gain
        self._loop = loop
        self._buffer = FrameBuffer(frame_size)
        self._file: Optional[sf.SoundFile] = None
        self._sample_rate: Optional[int] = None

    def start(self) -> None:
        if self._file is not None:
            return
        try:
            self._file = sf.SoundFile(self._file_path)
        except (RuntimeError, OSError) as e:
            raise AcquisitionError(f"Could not open {self._file_path}: {e}") from e
        self._sample_rate = self._file.samplerate
        self._buffer.clear()
        logger.info(
            f"Reading {self._file_path} ({self._file.samplerate} Hz, "
            f"{self._file.channels} ch, {self._file.frames} frames)"
        )

    def stop(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def is_running(self) -> bool:
        """Returns True while the file is open."""
        return self._file is not None

    def read_frame(self) -> Optional[AudioFrame]:
        """Advance one hop; None at end of file (unless looping) or when closed."""
        if self._file is None:
            return None

        data = self._file.read(self._hop_size, dtype="float32", always_2d=True)
        if len(data) == 0:
            if not self._loop:
                return None
            self._file.seek(0)
            data = self._file.read(self._hop_size, dtype="float32", always_2d=True)
            if len(data) == 0:
                return None

        # Apply gain if specified
        block = data[:, 0]
        if self._gain != 1.0:
            block = block * self._gain

        self._buffer.write(block)
        return AudioFrame(self._buffer.read(), self._sample_rate)

    @property
    def sample_rate(self) -> Optional[int]:
        """Sample rate of the file, known once started."""
        return self._sample_rate

    @property
    def channels(self) -> Optional[int]:
        return self._file.channels if self._file is not None else None
