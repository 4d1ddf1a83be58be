# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Silent sink implementation for testing."""

from typing import Any

from . import levels
from .sink import LogSink


class SilentSink(LogSink):
    """Sink that stores log messages in memory without output.

    Useful for testing to verify logging behavior without cluttering test output.
    Note: SilentSink does not filter by level - every level is enabled and
    all records are captured.
    """

    def __init__(self, name: str):
        """Initialize silent sink.

        Args:
            name: Logger (category) name
        """
        self.name = name
        self.factory: Any = None
        self.logs: list[dict[str, Any]] = []

    def set_log_factory(self, factory: Any) -> None:
        """Remember the factory that built this sink."""
        self.factory = factory

    def _log(self, level: int, message: str, exc: BaseException | None = None) -> None:
        """Internal method to store log message.

        Args:
            level: Log level
            message: The log message
            exc: Optional exception
        """
        self.logs.append({
            "level": levels.level_name(level),
            "message": message,
            "exc": exc,
        })

    def is_trace_enabled(self) -> bool:
        return True

    def is_debug_enabled(self) -> bool:
        return True

    def is_info_enabled(self) -> bool:
        return True

    def is_warn_enabled(self) -> bool:
        return True

    def is_error_enabled(self) -> bool:
        return True

    def is_fatal_enabled(self) -> bool:
        return True

    def trace(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.TRACE, message, exc)

    def debug(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.DEBUG, message, exc)

    def info(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.INFO, message, exc)

    def warn(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.WARN, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.ERROR, message, exc)

    def fatal(self, message: str, exc: BaseException | None = None) -> None:
        self._log(levels.FATAL, message, exc)

    def clear_logs(self) -> None:
        """Clear all stored log messages (useful for testing)."""
        self.logs.clear()

    def get_logs(self, level: str | None = None) -> list[dict[str, Any]]:
        """Get stored log messages, optionally filtered by level.

        Args:
            level: Optional level name to filter by (TRACE, DEBUG, INFO, WARN, ERROR, FATAL)

        Returns:
            List of log entries
        """
        if level is None:
            return self.logs
        return [log for log in self.logs if log["level"] == level]

    def has_log(self, message: str, level: str | None = None) -> bool:
        """Check if a specific log message exists.

        Args:
            message: Message to search for (substring match)
            level: Optional level name to filter by

        Returns:
            True if message is found, False otherwise
        """
        return any(message in log["message"] for log in self.get_logs(level))
