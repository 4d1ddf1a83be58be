# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Abstract log sink interface."""

from abc import ABC, abstractmethod


class LogSink(ABC):
    """Abstract base class for log sinks.

    A sink is constructed from a single logger name. Sinks that want a
    reference to the factory that built them may also define
    ``set_log_factory(factory)``.
    """

    @abstractmethod
    def is_trace_enabled(self) -> bool:
        """Return True if trace-level messages are logged."""
        pass

    @abstractmethod
    def is_debug_enabled(self) -> bool:
        """Return True if debug-level messages are logged."""
        pass

    @abstractmethod
    def is_info_enabled(self) -> bool:
        """Return True if info-level messages are logged."""
        pass

    @abstractmethod
    def is_warn_enabled(self) -> bool:
        """Return True if warn-level messages are logged."""
        pass

    @abstractmethod
    def is_error_enabled(self) -> bool:
        """Return True if error-level messages are logged."""
        pass

    @abstractmethod
    def is_fatal_enabled(self) -> bool:
        """Return True if fatal-level messages are logged."""
        pass

    @abstractmethod
    def trace(self, message: str, exc: BaseException | None = None) -> None:
        """Log a trace-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass

    @abstractmethod
    def debug(self, message: str, exc: BaseException | None = None) -> None:
        """Log a debug-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass

    @abstractmethod
    def info(self, message: str, exc: BaseException | None = None) -> None:
        """Log an info-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass

    @abstractmethod
    def warn(self, message: str, exc: BaseException | None = None) -> None:
        """Log a warn-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass

    @abstractmethod
    def error(self, message: str, exc: BaseException | None = None) -> None:
        """Log an error-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass

    @abstractmethod
    def fatal(self, message: str, exc: BaseException | None = None) -> None:
        """Log a fatal-level message.

        Args:
            message: The log message
            exc: Optional exception whose traceback is logged
        """
        pass
