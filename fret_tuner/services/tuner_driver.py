"""Tick source feeding a tuning session."""

from __future__ import annotations
import time
from typing import Callable, Iterator, Optional

from ..logger import get_logger
from ..note_types import FrameResult
from ..session import TunerSession

logger = get_logger(__name__)


class TunerDriver:
    """Runs exactly one pipeline pass per tick, never overlapping.

    Hosts either call ``tick`` from their own refresh loop, iterate over
    ``ticks``, or hand control to ``run``. Every form checks that the
    session is still listening before it pulls a frame, so a ``stop`` issued
    during a tick ends the loop without another pass.
    """

    def __init__(
        self,
        session: TunerSession,
        tick_interval: float = 1.0 / 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the driver.

        Args:
            session: Session to feed; its audio input supplies the frames
            tick_interval: Target seconds between ticks in ``run`` (0 for as
                fast as frames arrive)
            clock: Monotonic time source
            sleep: Function used to wait between ticks
        """
        if tick_interval < 0:
            raise ValueError("tick_interval must not be negative")
        self._session = session
        self._tick_interval = tick_interval
        self._clock = clock
        self._sleep = sleep
        self._tick_count = 0

    def tick(self) -> Optional[FrameResult]:
        """Pull the latest frame and process it.

        Returns:
            The frame result, or None if the session is not listening or the
            input has no more audio (the session is stopped in that case)
        """
        if not self._session.is_listening:
            return None
        audio_input = self._session.audio_input
        if audio_input is None:
            return None

        frame = audio_input.read_frame()
        if frame is None:
            logger.info("Audio input exhausted, stopping session")
            self._session.stop()
            return None

        self._tick_count += 1
        return self._session.process_frame(frame)

    def ticks(self, max_ticks: Optional[int] = None) -> Iterator[FrameResult]:
        """Yield one result per tick until the session stops."""
        produced = 0
        while max_ticks is None or produced < max_ticks:
            result = self.tick()
            if result is None:
                return
            produced += 1
            yield result

    def run(
        self,
        duration: Optional[float] = None,
        on_result: Optional[Callable[[FrameResult], None]] = None,
    ) -> int:
        """Tick at ``tick_interval`` until stopped, exhausted or timed out.

        The session is always stopped on return, which releases its input.

        Args:
            duration: Maximum seconds to run, or None for no limit
            on_result: Called with every frame result

        Returns:
            Number of ticks processed
        """
        started = self._clock()
        processed = 0
        try:
            while self._session.is_listening:
                tick_started = self._clock()
                if duration is not None and tick_started - started >= duration:
                    break

                result = self.tick()
                if result is None:
                    break
                processed += 1
                if on_result is not None:
                    on_result(result)

                remaining = self._tick_interval - (self._clock() - tick_started)
                if remaining > 0 and self._session.is_listening:
                    self._sleep(remaining)
        except KeyboardInterrupt:
            logger.info("Tuning interrupted by user")
        finally:
            self._session.stop()

        logger.info(f"Driver finished after {processed} ticks")
        return processed

    @property
    def tick_count(self) -> int:
        """Frames processed over the driver's lifetime."""
        return self._tick_count
