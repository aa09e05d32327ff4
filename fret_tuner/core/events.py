"""Event system for fret_tuner components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types emitted by a tuning session."""

    FRAME_PROCESSED = auto()
    MODE_CHANGED = auto()
    TONE_REQUESTED = auto()
    ERROR = auto()


class EventEmitter:
    """Event emitter for fret_tuner components."""

    def __init__(self):
        """Start with no listeners."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Subscribe ``callback`` to ``event_type``; duplicates are ignored.

        Args:
            event_type: Key to subscribe to
            callback: Called with the emitted arguments
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Listener subscribed to {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Call every listener of ``event_type`` in subscription order.

        Listener failures are logged and never reach the emitter's caller.

        Args:
            event_type: Key whose listeners are called
            *args: Passed through to each listener
            **kwargs: Passed through to each listener
        """
        if event_type not in self._listeners:
            return

        # Copy so a listener may unsubscribe while we iterate
        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}", exc_info=True)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("All listeners removed")


class TunerEvents:
    """Event emitter specifically for tuning session events."""

    def __init__(self):
        """Initialize the tuner events."""
        self._emitter = EventEmitter()

    def on_frame_processed(self, callback: Callable) -> None:
        """Register ``callback(result)`` for every processed frame."""
        self._emitter.on(TunerEventType.FRAME_PROCESSED, callback)

    def on_mode_changed(self, callback: Callable) -> None:
        """Register ``callback(old_state, new_state)`` for mode changes."""
        self._emitter.on(TunerEventType.MODE_CHANGED, callback)

    def on_tone_requested(self, callback: Callable) -> None:
        """Register ``callback(guitar_string)`` for reference tone requests."""
        self._emitter.on(TunerEventType.TONE_REQUESTED, callback)

    def on_error(self, callback: Callable) -> None:
        """Register ``callback(exception)`` for acquisition errors."""
        self._emitter.on(TunerEventType.ERROR, callback)

    def emit_frame_processed(self, result) -> None:
        self._emitter.emit(TunerEventType.FRAME_PROCESSED, result)

    def emit_mode_changed(self, old_state, new_state) -> None:
        self._emitter.emit(TunerEventType.MODE_CHANGED, old_state, new_state)

    def emit_tone_requested(self, guitar_string) -> None:
        self._emitter.emit(TunerEventType.TONE_REQUESTED, guitar_string)

    def emit_error(self, error: Exception) -> None:
        self._emitter.emit(TunerEventType.ERROR, error)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
