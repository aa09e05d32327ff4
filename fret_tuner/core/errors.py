"""Exceptions raised by fret_tuner components."""


class TunerError(Exception):
    """Base class for fret_tuner errors."""


class AcquisitionError(TunerError):
    """The audio input could not be acquired (missing, busy or denied).

    Fatal to the session that tried to start; only a new start() clears it.
    """
