"""Tuning session: one object owning every piece of cross-frame state."""

from __future__ import annotations
from typing import Optional, Tuple

from .logger import get_logger
from .note_types import (
    AudioFrame,
    FrameResult,
    GuitarString,
    ModeState,
    NoteReading,
    Transition,
    TunerMode,
    TunerStatus,
)
from .note_utils import get_note_from_frequency
from . import mode_controller
from .reference_matcher import ReferenceMatcher, clamp_cents
from .audio.pitch_estimator import AutocorrelationPitchEstimator
from .audio.signal_gate import SignalGate
from .detection.median_stabilizer import MedianStabilizer
from .detection.deviation_smoother import DeviationSmoother
from .core.errors import AcquisitionError
from .core.events import TunerEvents
from .core.interfaces import IAudioInput, IPitchEstimator, ITonePlayer

logger = get_logger(__name__)


class TunerSession:
    """Runs the tuning pipeline one frame at a time.

    ``process_frame`` is the only per-frame entry point; ``start``, ``stop``
    and ``select_target`` are the commands a UI issues between frames. The
    session is not thread-safe: one driver feeds it frames in order.
    """

    def __init__(
        self,
        audio_input: Optional[IAudioInput] = None,
        tone_player: Optional[ITonePlayer] = None,
        estimator: Optional[IPitchEstimator] = None,
        gate: Optional[SignalGate] = None,
        stabilizer: Optional[MedianStabilizer] = None,
        matcher: Optional[ReferenceMatcher] = None,
        smoother: Optional[DeviationSmoother] = None,
        events: Optional[TunerEvents] = None,
    ) -> None:
        """Initialize the session.

        Args:
            audio_input: Input acquired on start and released on stop, or None
                when frames are supplied by the caller
            tone_player: Reference tone output, or None to only emit the request
            estimator: Per-frame pitch estimator
            gate: Outer volume gate
            stabilizer: Median filter over raw estimates
            matcher: Reference table matcher
            smoother: Needle smoothing filter
            events: Event hub, or None to create one
        """
        self._audio_input = audio_input
        self._tone_player = tone_player
        self._estimator = estimator or AutocorrelationPitchEstimator()
        self._gate = gate or SignalGate()
        self._stabilizer = stabilizer or MedianStabilizer()
        self._matcher = matcher or ReferenceMatcher()
        self._smoother = smoother or DeviationSmoother()
        self.events = events or TunerEvents()

        self._state = mode_controller.IDLE
        self._status = TunerStatus.INACTIVE
        self._volume = 0.0
        self._detected_index: Optional[int] = None
        self._stabilized_frequency: Optional[float] = None
        self._note: Optional[NoteReading] = None

    # -- commands -----------------------------------------------------------

    def start(self) -> None:
        """Start listening, in AUTO or in a manual lock kept from before.

        Raises:
            AcquisitionError: If the audio input cannot be acquired
        """
        if self._state.mode is not TunerMode.IDLE:
            logger.warning("Tuner already running")
            return
        self._apply(mode_controller.start(self._state))

    def stop(self) -> None:
        """Stop listening and clear everything except a manual lock.

        Safe to call at any time, including from a listener while a frame is
        being processed.
        """
        self._apply(mode_controller.stop(self._state))
        self._volume = 0.0
        self._stabilized_frequency = None
        self._note = None

    def select_target(self, index: int) -> None:
        """Lock onto string ``index``, or unlock it if it is already locked.

        Starts the session when idle.

        Raises:
            ValueError: If index is not a position in the reference table
            AcquisitionError: If the session had to start and could not
        """
        if not 0 <= index < len(self._matcher.table):
            raise ValueError(
                f"String index must be between 0 and {len(self._matcher.table) - 1}, got {index}"
            )
        self._apply(mode_controller.select_target(self._state, index))

    def _apply(self, transition: Transition) -> None:
        old_state = self._state
        if transition.acquire:
            self._acquire()
        if transition.release:
            self._release()

        self._state = transition.state
        if transition.reset_tracking:
            self._stabilizer.reset()
            self._smoother.reset()
        if transition.clear_detected:
            self._detected_index = None

        if old_state != self._state:
            logger.info(f"Mode {self._describe(old_state)} -> {self._describe(self._state)}")
            self.events.emit_mode_changed(old_state, self._state)

        # A listener may have changed the mode while handling the event
        if (
            transition.tone_index is not None
            and self._state == transition.state
        ):
            self._request_tone(transition.tone_index)

    def _acquire(self) -> None:
        if self._audio_input is not None:
            try:
                self._audio_input.start()
            except AcquisitionError as e:
                self._status = TunerStatus.ERROR
                logger.error(f"Could not acquire audio input: {e}")
                self.events.emit_error(e)
                raise
        self._status = TunerStatus.LISTENING
        logger.info("Listening")

    def _release(self) -> None:
        if self._audio_input is not None:
            try:
                self._audio_input.stop()
            except Exception as e:
                # The session returns to idle whatever the device does
                logger.error(f"Error releasing audio input: {e}", exc_info=True)
        self._status = TunerStatus.INACTIVE
        logger.info("Stopped listening")

    def _request_tone(self, index: int) -> None:
        string = self._matcher.table[index]
        self.events.emit_tone_requested(string)
        if self._tone_player is None:
            return
        try:
            self._tone_player.play(string.frequency)
        except Exception as e:
            # Playback is best effort and must never disturb tuning
            logger.warning(f"Reference tone for {string.label} failed: {e}")

    def _describe(self, state: ModeState) -> str:
        if state.mode is TunerMode.MANUAL:
            return f"manual({self._matcher.table[state.locked_index].label})"
        return state.mode.value

    # -- per-frame pipeline -------------------------------------------------

    def process_frame(self, frame: AudioFrame) -> FrameResult:
        """Run one pipeline pass.

        Frames without a usable pitch leave the matched string, the
        stabilized pitch and the needle where they were.

        Args:
            frame: Latest samples from the input

        Returns:
            Snapshot of the session after this frame
        """
        if self._state.mode is TunerMode.IDLE:
            return self.snapshot()

        self._volume = self._gate.measure(frame.samples)
        if not self._gate.is_open(self._volume):
            self._stabilizer.on_silence()
            return self._finish(pitch_detected=False)

        raw_frequency = self._estimator.estimate(frame)
        if raw_frequency is None:
            return self._finish(pitch_detected=False)

        stabilized = self._stabilizer.add(raw_frequency)
        match = self._matcher.match(stabilized, self._state)
        self._stabilized_frequency = stabilized
        self._detected_index = match.detected_index
        self._state = mode_controller.record_match(self._state, match.active_index)
        self._smoother.update(match.offset_cents)
        self._note = get_note_from_frequency(stabilized)

        logger.debug(
            f"raw={raw_frequency:.2f}Hz stable={stabilized:.2f}Hz "
            f"active={match.active_index} detected={match.detected_index} "
            f"offset={match.offset_cents:+.2f} needle={self._smoother.value:+.2f}"
        )
        return self._finish(pitch_detected=True)

    def _finish(self, pitch_detected: bool) -> FrameResult:
        result = self.snapshot(pitch_detected=pitch_detected)
        self.events.emit_frame_processed(result)
        return result

    def snapshot(self, pitch_detected: bool = False) -> FrameResult:
        """Current output values without processing a frame."""
        active = self.active_index
        audible = self._gate.is_open(self._volume)
        listening = self._status is TunerStatus.LISTENING
        off_target = (
            self._state.mode is TunerMode.MANUAL
            and self._detected_index is not None
            and self._detected_index != active
            and audible
        )
        return FrameResult(
            volume=self._volume,
            stabilized_frequency=self._stabilized_frequency,
            active_reference_index=active,
            detected_reference_index=self._detected_index,
            smoothed_cents_offset=clamp_cents(self._smoother.value),
            note=self._note,
            pitch_detected=pitch_detected,
            mode=self._state.mode,
            gauge_active=listening and audible,
            off_target=off_target,
            target_label=self._matcher.table[active].label if active is not None else "",
        )

    # -- state accessors ----------------------------------------------------

    @property
    def state(self) -> ModeState:
        return self._state

    @property
    def mode(self) -> TunerMode:
        return self._state.mode

    @property
    def status(self) -> TunerStatus:
        return self._status

    @property
    def is_listening(self) -> bool:
        return self._status is TunerStatus.LISTENING

    @property
    def locked_index(self) -> Optional[int]:
        return self._state.locked_index

    @property
    def active_index(self) -> Optional[int]:
        """String the needle refers to: the lock, or the last AUTO match."""
        return self._state.locked_index

    @property
    def detected_index(self) -> Optional[int]:
        return self._detected_index

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def smoothed_cents(self) -> float:
        return self._smoother.value

    @property
    def stabilized_frequency(self) -> Optional[float]:
        return self._stabilized_frequency

    @property
    def note(self) -> Optional[NoteReading]:
        return self._note

    @property
    def stabilizer(self) -> MedianStabilizer:
        return self._stabilizer

    @property
    def audio_input(self) -> Optional[IAudioInput]:
        return self._audio_input

    @property
    def reference_table(self) -> Tuple[GuitarString, ...]:
        return self._matcher.table
