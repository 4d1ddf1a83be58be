# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Console sink that writes formatted text lines to stderr."""

import sys
import traceback

from . import levels
from .config import SinkSettings, get_sink_settings
from .sink import LogSink


class ConsoleSink(LogSink):
    """Sink that formats each record as a line of text and writes it to stderr.

    The line layout is controlled by the shared ``SinkSettings``::

        [<date> ][[LEVEL] ]<short name or full name> - <message>[ <ExcType: text>\\n<traceback>]

    The level of each sink comes from ``copilot_logfacade.sink.log.<category>``,
    walking up dotted parent categories, then ``copilot_logfacade.sink.defaultlog``,
    and finally INFO.
    """

    def __init__(self, name: str):
        """Initialize console sink.

        Args:
            name: Logger (category) name
        """
        self.name = name
        self.settings: SinkSettings = get_sink_settings()
        self.level = self.settings.level_for(name)
        self._short_name: str | None = None

    def set_level(self, level: int) -> None:
        """Set the sink's level (one of the ``levels`` constants)."""
        self.level = level

    def get_level(self) -> int:
        return self.level

    @property
    def short_name(self) -> str:
        """Last component of the name, split on ``.`` and then ``/``."""
        if self._short_name is None:
            short = self.name.rsplit(".", 1)[-1]
            self._short_name = short.rsplit("/", 1)[-1]
        return self._short_name

    def is_level_enabled(self, level: int) -> bool:
        return level >= self.level

    def format_message(self, level: int, message: str, exc: BaseException | None = None) -> str:
        """Build the text line for a record.

        Args:
            level: Record level
            message: The log message
            exc: Optional exception to append with its traceback

        Returns:
            Formatted text
        """
        parts = []
        settings = self.settings
        if settings.show_date_time and settings.date_formatter is not None:
            parts.append(settings.date_formatter.format())
            parts.append(" ")

        if settings.show_level:
            parts.append(f"[{levels.level_name(level)}] ")

        if settings.show_short_name:
            parts.append(f"{self.short_name} - ")
        elif settings.show_log_name:
            parts.append(f"{self.name} - ")

        parts.append(str(message))

        if exc is not None:
            parts.append(f" <{type(exc).__name__}: {exc}>\n")
            parts.append("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))

        return "".join(parts)

    def write(self, level: int, text: str) -> None:
        """Write a formatted line to stderr."""
        print(text, file=sys.stderr, flush=True)

    def _log(self, level: int, message: str, exc: BaseException | None = None) -> None:
        if not self.is_level_enabled(level):
            return
        self.write(level, self.format_message(level, message, exc))

    def is_trace_enabled(self) -> bool:
        return self.is_level_enabled(levels.TRACE)

    def is_debug_enabled(self) -> bool:
        return self.is_level_enabled(levels.DEBUG)

    def is_info_enabled(self) -> bool:
        return self.is_level_enabled(levels.INFO)

    def is_warn_enabled(self) -> bool:
        return self.is_level_enabled(levels.WARN)

    def is_error_enabled(self) -> bool:
        return self.is_level_enabled(levels.ERROR)

    def is_fatal_enabled(self) -> bool:
        return self.is_level_enabled(levels.FATAL)

    def trace(self, message: str, exc: BaseException | None = None) -> None:
        """Log a trace-level message."""
        self._log(levels.TRACE, message, exc)

    def debug(self, message: str, exc: BaseException | None = None) -> None:
        """Log a debug-level message."""
        self._log(levels.DEBUG, message, exc)

    def info(self, message: str, exc: BaseException | None = None) -> None:
        """Log an info-level message."""
        self._log(levels.INFO, message, exc)

    def warn(self, message: str, exc: BaseException | None = None) -> None:
        """Log a warn-level message."""
        self._log(levels.WARN, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        """Log an error-level message."""
        self._log(levels.ERROR, message, exc)

    def fatal(self, message: str, exc: BaseException | None = None) -> None:
        """Log a fatal-level message."""
        self._log(levels.FATAL, message, exc)
