# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Logger facade used by application code."""

import sys
from typing import Any

from . import levels
from .sink import LogSink


class Logger:
    """Per-name logger that formats messages and forwards them to a sink.

    Messages use ``%``-style substitution, applied only when the level is
    enabled. The exception, if any, is always passed as the ``exc`` keyword.

    Example:
        >>> logger = get_logger("com.acme.Widget")
        >>> logger.info("started %s workers", 4)
        >>> logger.error("request %s failed", request_id, exc=err)
    """

    def __init__(self, name: str, sink: LogSink):
        """Initialize the logger.

        Args:
            name: Logger (category) name
            sink: Sink records are forwarded to
        """
        self.name = name
        self.sink = sink
        self._enabled = {
            levels.TRACE: sink.is_trace_enabled,
            levels.DEBUG: sink.is_debug_enabled,
            levels.INFO: sink.is_info_enabled,
            levels.WARN: sink.is_warn_enabled,
            levels.ERROR: sink.is_error_enabled,
            levels.FATAL: sink.is_fatal_enabled,
        }
        self._emit = {
            levels.TRACE: sink.trace,
            levels.DEBUG: sink.debug,
            levels.INFO: sink.info,
            levels.WARN: sink.warn,
            levels.ERROR: sink.error,
            levels.FATAL: sink.fatal,
        }

    def __repr__(self) -> str:
        return f"Logger({self.name!r}, sink={type(self.sink).__name__})"

    @staticmethod
    def format_message(message: Any, args: tuple[Any, ...]) -> str:
        """Apply ``%`` substitution, tolerating mismatched arguments."""
        text = str(message)
        if not args:
            return text
        try:
            return text % args
        except (TypeError, ValueError):
            return " ".join([text, *(str(arg) for arg in args)])

    def is_enabled(self, level: int) -> bool:
        """Return True if ``level`` is enabled on the sink.

        Raises:
            ValueError: If ``level`` is not one of TRACE..FATAL
        """
        try:
            return self._enabled[level]()
        except KeyError:
            raise ValueError(f"Invalid log level: {level}") from None

    def log(self, level: int, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log ``message % args`` at ``level``.

        Args:
            level: One of ``levels.TRACE`` .. ``levels.FATAL``
            message: Message template
            *args: Substitution values
            exc: Optional exception whose traceback is logged
        """
        if not self.is_enabled(level):
            return
        self._emit[level](self.format_message(message, args), exc)

    def is_trace_enabled(self) -> bool:
        return self.sink.is_trace_enabled()

    def is_debug_enabled(self) -> bool:
        return self.sink.is_debug_enabled()

    def is_info_enabled(self) -> bool:
        return self.sink.is_info_enabled()

    def is_warn_enabled(self) -> bool:
        return self.sink.is_warn_enabled()

    def is_error_enabled(self) -> bool:
        return self.sink.is_error_enabled()

    def is_fatal_enabled(self) -> bool:
        return self.sink.is_fatal_enabled()

    def trace(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log a trace-level message."""
        self.log(levels.TRACE, message, *args, exc=exc)

    def debug(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log a debug-level message."""
        self.log(levels.DEBUG, message, *args, exc=exc)

    def info(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log an info-level message."""
        self.log(levels.INFO, message, *args, exc=exc)

    def warn(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log a warn-level message."""
        self.log(levels.WARN, message, *args, exc=exc)

    warning = warn

    def error(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log an error-level message."""
        self.log(levels.ERROR, message, *args, exc=exc)

    def exception(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log an error-level message with the exception being handled.

        Intended for use inside an ``except`` block.
        """
        if exc is None:
            exc = sys.exc_info()[1]
        self.log(levels.ERROR, message, *args, exc=exc)

    def fatal(self, message: Any, *args: Any, exc: BaseException | None = None) -> None:
        """Log a fatal-level message."""
        self.log(levels.FATAL, message, *args, exc=exc)
