"""Logger adapter built on the standard logging module."""

import logging
from typing import Any

from ..ports.logger import LoggerPort

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SimpleLogger(LoggerPort):
    """LoggerPort implementation that forwards to ``logging``.

    Structured keyword context is attached to each record through
    ``extra`` and also appended to the message so it shows up with the
    default formatter.
    """

    def __init__(self, name: str = "subscription_service", level: int | str = logging.INFO):
        """Initialize the logger.

        Args:
            name: Logger name (default: "subscription_service")
            level: Logging level as an int or a level name (default: INFO)
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Add console handler if not already present
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self._logger.addHandler(handler)

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._render(message, kwargs), extra={"context": kwargs})

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._render(message, kwargs), extra={"context": kwargs})

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._render(message, kwargs), extra={"context": kwargs})

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._render(message, kwargs), extra={"context": kwargs})

    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        self._logger.exception(
            self._render(message, kwargs),
            exc_info=exc_info or True,
            extra={"context": kwargs},
        )

    @staticmethod
    def _render(message: str, context: dict[str, Any]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} [{pairs}]"
