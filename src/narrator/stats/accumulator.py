"""Per-session listening time measurement."""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class ListeningStatsSink(Protocol):
    """Anything that can record listening time (StatsStore satisfies this)."""

    def add_listening_seconds(self, user_id: str, seconds: float) -> None: ...


class SessionStatsAccumulator:
    """Measures wall-clock listening time for one session at a time.

    begin() starts the clock if it is not running; flush() stops it and
    reports the elapsed time. A flush with no running session adds nothing,
    so repeated stops never double count.
    """

    def __init__(
        self,
        store: ListeningStatsSink | None,
        user_id: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize accumulator.

        Args:
            store: Where elapsed time is reported; None disables reporting
            user_id: Listener the time is credited to
            clock: Monotonic time source in seconds
        """
        self.store = store
        self.user_id = user_id
        self._clock = clock
        self._started_at: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def begin(self) -> None:
        """Start the session clock unless it is already running."""
        if self._started_at is None:
            self._started_at = self._clock()
            logger.debug("Listening session started")

    def elapsed(self) -> float:
        """Seconds since begin(), 0.0 if no session is running."""
        if self._started_at is None:
            return 0.0
        return max(0.0, self._clock() - self._started_at)

    async def flush(self) -> float:
        """End the session and report its duration.

        Store failures are logged and never raised.

        Returns:
            Seconds credited for the session (0.0 if none was running)
        """
        if self._started_at is None:
            return 0.0

        seconds = self.elapsed()
        self._started_at = None
        logger.info(f"Listening session ended after {seconds:.1f}s")

        if self.store is None:
            return seconds

        try:
            await asyncio.to_thread(
                self.store.add_listening_seconds, self.user_id, seconds
            )
        except Exception as e:
            logger.warning(f"Failed to record listening time: {e}")
        return seconds
