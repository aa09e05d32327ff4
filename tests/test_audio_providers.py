import numpy as np
import pytest
import soundfile as sf

from fret_tuner.audio.frame_buffer import FrameBuffer
from fret_tuner.audio.tone import TONE_FLOOR_GAIN, synthesize_tone
from fret_tuner.core.errors import AcquisitionError
from fret_tuner.services import WavFileInput

from helpers import sine


@pytest.fixture
def wav_110(tmp_path):
    path = tmp_path / "a2.wav"
    sf.write(str(path), sine(110.0, size=48000), 48000)
    return str(path)


class TestFrameBuffer:
    def test_starts_silent(self):
        buffer = FrameBuffer(8)
        assert buffer.filled == 0
        assert np.all(buffer.read() == 0.0)

    def test_latest_samples_at_the_end(self):
        buffer = FrameBuffer(4)
        buffer.write(np.array([1.0, 2.0]))
        buffer.write(np.array([3.0, 4.0, 5.0]))
        assert buffer.read().tolist() == [2.0, 3.0, 4.0, 5.0]
        assert buffer.filled == 4

    def test_block_larger_than_window(self):
        buffer = FrameBuffer(3)
        buffer.write(np.arange(10, dtype=np.float32))
        assert buffer.read().tolist() == [7.0, 8.0, 9.0]

    def test_read_is_a_copy(self):
        buffer = FrameBuffer(2)
        buffer.write(np.array([1.0, 1.0]))
        window = buffer.read()
        window[:] = 0.0
        assert buffer.read().tolist() == [1.0, 1.0]

    def test_clear(self):
        buffer = FrameBuffer(2)
        buffer.write(np.array([1.0]))
        buffer.clear()
        assert buffer.filled == 0
        assert buffer.read().tolist() == [0.0, 0.0]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            FrameBuffer(0)


class TestWavFileInput:
    def test_frames_slide_by_hop(self, wav_110):
        audio_input = WavFileInput(wav_110, frame_size=8192, hop_size=1024)
        audio_input.start()
        assert audio_input.is_running()
        assert audio_input.sample_rate == 48000
        assert audio_input.channels == 1

        first = audio_input.read_frame()
        assert len(first) == 8192
        assert first.sample_rate == 48000
        assert np.all(first.samples[:-1024] == 0.0)
        assert np.any(first.samples[-1024:] != 0.0)

        frames = 1
        while audio_input.read_frame() is not None:
            frames += 1
        # 48000 samples in hops of 1024, the last one partial
        assert frames == 47

    def test_gain(self, wav_110):
        plain = WavFileInput(wav_110, hop_size=4096)
        loud = WavFileInput(wav_110, hop_size=4096, gain=2.0)
        plain.start()
        loud.start()
        a = plain.read_frame().samples
        b = loud.read_frame().samples
        np.testing.assert_allclose(b, a * 2.0, rtol=1e-5)

    def test_loop_rewinds(self, wav_110):
        audio_input = WavFileInput(wav_110, hop_size=48000, loop=True)
        audio_input.start()
        assert audio_input.read_frame() is not None
        assert audio_input.read_frame() is not None

    def test_stopped_input_returns_nothing(self, wav_110):
        audio_input = WavFileInput(wav_110)
        assert audio_input.read_frame() is None
        audio_input.start()
        audio_input.stop()
        assert not audio_input.is_running()
        assert audio_input.read_frame() is None

    def test_missing_file(self, tmp_path):
        audio_input = WavFileInput(str(tmp_path / "missing.wav"))
        with pytest.raises(AcquisitionError):
            audio_input.start()
        assert not audio_input.is_running()

    def test_stereo_uses_first_channel(self, tmp_path):
        path = tmp_path / "stereo.wav"
        left = sine(220.0, size=4096)
        data = np.column_stack([left, np.zeros_like(left)])
        sf.write(str(path), data, 48000, subtype="FLOAT")
        audio_input = WavFileInput(str(path), frame_size=4096, hop_size=4096)
        audio_input.start()
        assert audio_input.channels == 2
        np.testing.assert_allclose(audio_input.read_frame().samples, left, atol=1e-6)

    def test_invalid_hop(self, wav_110):
        with pytest.raises(ValueError):
            WavFileInput(wav_110, hop_size=0)


class TestTone:
    def test_length_and_envelope(self):
        tone = synthesize_tone(82.41, sample_rate=48000, duration=2.0, gain=0.3)
        assert tone.dtype == np.float32
        assert len(tone) == 96000
        assert np.max(np.abs(tone[:2000])) == pytest.approx(0.3, rel=0.02)
        assert np.max(np.abs(tone[-2000:])) < 0.3 * 0.01
        assert np.max(np.abs(tone[-2000:])) >= TONE_FLOOR_GAIN * 0.9

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"frequency": 0.0},
            {"frequency": 110.0, "duration": 0.0},
            {"frequency": 110.0, "gain": 1.5},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            synthesize_tone(**kwargs)
