"""Clock implementations: the system wall clock and a manual clock."""

from datetime import UTC, datetime

from ..ports.clock import ClockPort


class SystemClock(ClockPort):
    """Default clock implementation using system time.

    Returns whole unix seconds taken from a timezone-aware UTC datetime.
    """

    def now(self) -> int:
        """Get the current UTC time in unix seconds."""
        return int(datetime.now(UTC).timestamp())


class ManualClock(ClockPort):
    """Clock that only moves when told to.

    Used in tests and simulations to place operations exactly on window
    boundaries.
    """

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute timestamp. Moving backwards is allowed."""
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        """Move forward by ``seconds`` and return the new time."""
        if seconds < 0:
            raise ValueError("Cannot advance clock by a negative amount")
        self._now += seconds
        return self._now
