"""Clock port abstraction for time handling.

This module defines the clock abstraction to decouple the subscription
lifecycle from system time, so tests can pin time to exact window
boundaries.
"""

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Abstract clock interface for time operations.

    This port provides an abstraction over the trusted time source, allowing for:
    - Deterministic tests with fixed or manually advanced clocks
    - Plugging in an external trusted timestamp source
    """

    @abstractmethod
    def now(self) -> int:
        """Get the current time.

        Returns:
            Signed unix timestamp in whole seconds.

        Note:
            Implementations must be monotonic for the duration of a single
            operation and expose no failure mode.
        """
        ...
