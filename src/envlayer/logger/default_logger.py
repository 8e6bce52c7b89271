"""
Console logger writing plain lines to a stream.

Mirrors what a user expects from a dotenv loader at startup: one short,
prefixed line per event, e.g. ``[envlayer@0.1.0] injecting env (3) from .env``.
"""

import logging
import sys
import uuid
from typing import Any, TextIO

from .interface import Logger

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class DefaultLogger(Logger):
    """Stream logger with a ``[name@version]`` prefix.

    Example:
        logger = DefaultLogger()
        logger.info("injecting env (2) from .env")
        logger.debug("BASIC is already defined and was NOT overwritten", key="BASIC")
    """

    def __init__(
        self,
        name: str = "envlayer",
        output: TextIO = sys.stdout,
        level: int = logging.INFO,
        version: str = "",
    ):
        """Initialize the console logger.

        Args:
            name: Logger name, shown in the prefix
            output: Output stream (default: stdout)
            level: Minimum level written to the stream
            version: Optional version string appended to the prefix
        """
        self.name = name
        self._output = output
        self._level = level
        self._version = version
        self._session_id = str(uuid.uuid4())

    def get_session_id(self) -> str:
        """Get the current session ID."""
        return self._session_id

    def _prefix(self) -> str:
        if self._version:
            return f"[{self.name}@{self._version}]"
        return f"[{self.name}]"

    def _format_message(self, level: str, message: str, **kwargs: Any) -> str:
        parts = [self._prefix()]
        if level != "INFO":
            parts.append(f"[{level}]")
        parts.append(message)

        if kwargs:
            extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
            parts.append(f"({extra})")

        return " ".join(parts)

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        if _LEVELS[level] < self._level:
            return
        print(self._format_message(level, message, **kwargs), file=self._output, flush=True)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log("CRITICAL", message, **kwargs)
