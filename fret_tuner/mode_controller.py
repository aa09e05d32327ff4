"""Tuning mode state machine.

States are ``IDLE``, ``AUTO`` and ``MANUAL(locked_index)``. Every command is a
pure function from the current ``ModeState`` to a ``Transition`` that carries
the next state and the side effects the session has to perform.
"""

from .note_types import ModeState, Transition, TunerMode

IDLE = ModeState()


def start(state: ModeState) -> Transition:
    """Begin listening.

    A manual lock preserved across a stop resumes as ``MANUAL``; otherwise
    the session starts in ``AUTO`` with no previous match.
    """
    if state.mode is not TunerMode.IDLE:
        return Transition(state=state)
    if state.locked_index is not None:
        return Transition(
            state=ModeState(TunerMode.MANUAL, state.locked_index), acquire=True
        )
    return Transition(state=ModeState(TunerMode.AUTO), acquire=True)


def stop(state: ModeState) -> Transition:
    """Return to ``IDLE``, keeping only a manual lock."""
    kept = (
        state.locked_index
        if state.mode in (TunerMode.MANUAL, TunerMode.IDLE)
        else None
    )
    return Transition(
        state=ModeState(TunerMode.IDLE, kept),
        release=state.mode is not TunerMode.IDLE,
        reset_tracking=True,
        clear_detected=True,
    )


def select_target(state: ModeState, index: int) -> Transition:
    """Lock onto a string, or unlock when the locked string is selected again."""
    if state.mode is TunerMode.MANUAL and state.locked_index == index:
        return unlock(state)
    return lock(state, index)


def lock(state: ModeState, index: int) -> Transition:
    """Enter ``MANUAL(index)`` from any state, starting the session if idle."""
    return Transition(
        state=ModeState(TunerMode.MANUAL, index),
        acquire=state.mode is TunerMode.IDLE,
        reset_tracking=True,
        tone_index=index,
    )


def unlock(state: ModeState) -> Transition:
    """Leave ``MANUAL`` for ``AUTO`` with no previous match."""
    return Transition(state=ModeState(TunerMode.AUTO), clear_detected=True)


def record_match(state: ModeState, active_index: int) -> ModeState:
    """Remember the string ``AUTO`` matched so the next frame can hold it."""
    if state.mode is TunerMode.AUTO and state.locked_index != active_index:
        return ModeState(TunerMode.AUTO, active_index)
    return state
