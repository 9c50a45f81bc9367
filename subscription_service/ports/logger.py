"""Logger port used by the application layer.

Domain code never logs. Use cases and the renewal worker report what they
did through this port so the hosting service decides where logs go.
"""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Abstract interface for structured logging.

    Keyword arguments carry structured context such as ``provider_id`` or
    ``subscriber`` and are passed to the backend untouched.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        ...

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log a state change that succeeded."""
        ...

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a business denial such as a declined payment."""
        ...

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        ...

    @abstractmethod
    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log an unexpected exception with its traceback."""
        ...
