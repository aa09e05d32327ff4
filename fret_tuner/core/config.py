"""Configuration management for fret_tuner components."""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)

# One JSON file per section, named ``<section>.json``
DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "signal_gate": {
        "volume_scale": 8.0,
        "volume_threshold": 0.05,
    },
    "pitch_estimator": {
        "min_rms": 0.03,
        "min_frequency": 50.0,
        "min_correlation": 0.85,
    },
    "stabilizer": {
        "window_size": 8,
        "eviction_probability": 0.1,
    },
    "matcher": {
        "hysteresis_cents": 300.0,
        "clamp_cents": 50.0,
    },
    "audio_input": {
        "sample_rate": 48000,
        "frame_size": 8192,
        "channels": 1,
        "block_size": 1024,
    },
    "tone": {
        "duration": 2.0,
        "gain": 0.3,
    },
    "driver": {
        "tick_interval": 1.0 / 60.0,
    },
}


class ConfigManager:
    """Tuning parameters persisted as JSON, one file per section.

    Only tuning parameters live here. Session state (mode, lock, history) is
    never written to disk. A missing file is created from the defaults; a
    file that cannot be parsed is reported and the defaults are used in its
    place without overwriting it.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory holding the section files, or None for
                ``~/.config/fret_tuner``
        """
        if config_dir is None:
            config_dir = os.path.join(os.path.expanduser("~"), ".config", "fret_tuner")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.configs: Dict[str, Dict[str, Any]] = {
            section: self.load_config(section, defaults)
            for section, defaults in DEFAULT_CONFIGS.items()
        }

    def _path(self, section: str) -> Path:
        return self.config_dir / f"{section}.json"

    def load_config(self, section: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
        """Read a section, filling keys the file lacks from ``defaults``."""
        path = self._path(section)
        if not path.exists():
            self.save_config(section, defaults)
            return dict(defaults)

        try:
            with open(path, "r") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Ignoring unreadable configuration {path}: {e}")
            return dict(defaults)

        if not isinstance(stored, dict):
            logger.error(f"Ignoring configuration {path}: expected a JSON object")
            return dict(defaults)

        logger.info(f"Loaded configuration from {path}")
        return {**defaults, **stored}

    def save_config(self, section: str, config: Dict[str, Any]) -> bool:
        """Write a section to disk.

        Returns:
            True if the file was written
        """
        path = self._path(section)
        try:
            with open(path, "w") as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Could not write configuration {path}: {e}")
            return False
        logger.debug(f"Saved configuration to {path}")
        return True

    def get_config(self, section: str) -> Dict[str, Any]:
        """Copy of a section; unknown sections are empty."""
        return dict(self.configs.get(section, {}))

    def update_config(self, section: str, updates: Dict[str, Any]) -> bool:
        """Merge ``updates`` into a known section and persist it."""
        if section not in self.configs:
            logger.error(f"Unknown configuration section: {section}")
            return False
        self.configs[section].update(updates)
        return self.save_config(section, self.configs[section])

    def reset_config(self, section: str) -> bool:
        """Restore a section's defaults and persist them."""
        if section not in DEFAULT_CONFIGS:
            logger.error(f"Unknown configuration section: {section}")
            return False
        self.configs[section] = dict(DEFAULT_CONFIGS[section])
        return self.save_config(section, self.configs[section])
