import logging

import pytest
import soundfile as sf
from click.testing import CliRunner

from fret_tuner.cli.main import cli, format_result
from fret_tuner.note_types import FrameResult, TunerMode
from fret_tuner.note_utils import get_note_from_frequency

from helpers import sine


@pytest.fixture(autouse=True)
def detach_cli_logging():
    yield
    package_logger = logging.getLogger("fret_tuner")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.propagate = True


@pytest.fixture
def wav_110(tmp_path):
    path = tmp_path / "a2.wav"
    sf.write(str(path), sine(110.0, size=48000), 48000)
    return str(path)


def run(tmp_path, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--config-dir", str(tmp_path / "config"), *args])


def test_analyze_auto(tmp_path, wav_110):
    result = run(tmp_path, "analyze", wav_110)
    assert result.exit_code == 0, result.output
    assert "Processed 47 frames" in result.output
    assert "A2" in result.output
    assert "Final: " in result.output
    assert "target A2" in result.output


def test_analyze_locked_string(tmp_path, wav_110):
    result = run(tmp_path, "analyze", wav_110, "--string", "0")
    assert result.exit_code == 0, result.output
    assert "target E2" in result.output
    assert "playing a different string" in result.output


def test_analyze_rejects_bad_string(tmp_path, wav_110):
    result = run(tmp_path, "analyze", wav_110, "--string", "6")
    assert result.exit_code != 0


def test_analyze_silence(tmp_path):
    path = tmp_path / "silence.wav"
    sf.write(str(path), sine(110.0, amplitude=0.0, size=16384), 48000)
    result = run(tmp_path, "analyze", str(path))
    assert result.exit_code == 0, result.output
    assert "Processed 16 frames, pitch in 0" in result.output
    assert "Final:" not in result.output


def test_format_without_pitch():
    assert "no pitch" in format_result(FrameResult())


def test_format_names_stabilized_pitch():
    result = FrameResult(
        volume=0.8,
        stabilized_frequency=441.0,
        active_reference_index=5,
        detected_reference_index=5,
        smoothed_cents_offset=12.0,
        note=get_note_from_frequency(441.0),
        pitch_detected=True,
        mode=TunerMode.AUTO,
        target_label="E4",
    )
    line = format_result(result)
    assert "441.00Hz A4" in line
    assert "+3c)" in line
    assert "target E4" in line
