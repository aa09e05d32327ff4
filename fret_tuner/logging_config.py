"""Centralized logging configuration for fret_tuner.

Each module obtains its logger through ``fret_tuner.logger.get_logger``; this
module decides the levels and the handler those loggers write to.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "fret_tuner": logging.INFO,
    "fret_tuner.session": logging.INFO,
    "fret_tuner.mode_controller": logging.INFO,
    "fret_tuner.reference_matcher": logging.INFO,  # DEBUG for per-frame matching
    # Signal path, very chatty at DEBUG (one line per frame)
    "fret_tuner.audio": logging.INFO,
    "fret_tuner.detection": logging.INFO,
    "fret_tuner.core": logging.INFO,
    "fret_tuner.services": logging.INFO,
    "fret_tuner.cli": logging.INFO,
    "fret_tuner.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "soundfile": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'fret_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # One shared console handler, rebuilt if stdout has been swapped since
    if _console_handler is None or _console_handler.stream is not sys.stdout:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("fret_tuner") and module_name != "fret_tuner.logger":
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels. Child modules (fret_tuner.audio.*) inherit
    # from the nearest configured parent and propagate up to it.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

    root_package = logging.getLogger("fret_tuner")
    for handler in root_package.handlers[:]:
        root_package.removeHandler(handler)
    root_package.addHandler(_console_handler)
    root_package.propagate = False

    # Confirm setup complete
    logging.getLogger("fret_tuner").info("Logging configuration complete")
