import json
import random

import pytest

from fret_tuner.core.config import DEFAULT_CONFIGS, ConfigManager
from fret_tuner.core.factory import ComponentFactory
from fret_tuner.note_types import TunerMode

from helpers import sine_frame


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / "config"


def test_defaults_written_on_first_use(config_dir):
    manager = ConfigManager(str(config_dir))
    for section, defaults in DEFAULT_CONFIGS.items():
        assert manager.get_config(section) == defaults
        assert (config_dir / f"{section}.json").exists()


def test_missing_keys_filled_from_defaults(config_dir):
    config_dir.mkdir()
    (config_dir / "matcher.json").write_text(json.dumps({"hysteresis_cents": 150.0}))
    manager = ConfigManager(str(config_dir))
    assert manager.get_config("matcher") == {"hysteresis_cents": 150.0, "clamp_cents": 50.0}


def test_unreadable_file_falls_back_to_defaults(config_dir):
    config_dir.mkdir()
    (config_dir / "stabilizer.json").write_text("{not json")
    manager = ConfigManager(str(config_dir))
    assert manager.get_config("stabilizer") == DEFAULT_CONFIGS["stabilizer"]
    # The broken file is left for the user to fix
    assert (config_dir / "stabilizer.json").read_text() == "{not json"


def test_update_and_reset(config_dir):
    manager = ConfigManager(str(config_dir))
    assert manager.update_config("signal_gate", {"volume_threshold": 0.1})
    assert ConfigManager(str(config_dir)).get_config("signal_gate")["volume_threshold"] == 0.1

    assert manager.reset_config("signal_gate")
    assert ConfigManager(str(config_dir)).get_config("signal_gate") == DEFAULT_CONFIGS["signal_gate"]


def test_unknown_section(config_dir):
    manager = ConfigManager(str(config_dir))
    assert manager.get_config("nope") == {}
    assert not manager.update_config("nope", {"a": 1})
    assert not manager.reset_config("nope")


def test_get_config_returns_copy(config_dir):
    manager = ConfigManager(str(config_dir))
    manager.get_config("tone")["gain"] = 0.9
    assert manager.get_config("tone")["gain"] == 0.3


def test_factory_applies_config_and_overrides(config_dir):
    manager = ConfigManager(str(config_dir))
    manager.update_config("stabilizer", {"window_size": 4})
    factory = ComponentFactory(manager)

    assert factory.create_stabilizer().window_size == 4
    assert factory.create_stabilizer(window_size=6).window_size == 6
    assert factory.create_signal_gate(volume_threshold=None).volume_threshold == 0.05


def test_factory_session_runs_pipeline(config_dir):
    factory = ComponentFactory(ConfigManager(str(config_dir)))
    session = factory.create_session(rng=random.Random(0))
    session.start()
    assert session.mode is TunerMode.AUTO

    result = session.process_frame(sine_frame(146.83))
    assert result.active_reference_index == 2
    assert result.target_label == "D3"
