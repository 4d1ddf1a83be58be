# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Exceptions raised while locating and building log sinks."""


class LogConfigurationError(Exception):
    """Base exception for fatal logging configuration problems."""
    pass


class UserMisconfigurationError(LogConfigurationError):
    """Raised when an explicitly configured sink class cannot be produced."""

    def __init__(self, class_name: str, suggestion: str | None = None):
        message = f"User-specified log sink '{class_name}' cannot be found or is not usable."
        if suggestion:
            message += f" Did you mean '{suggestion}'?"
        super().__init__(message)
        self.class_name = class_name
        self.suggestion = suggestion


class NoSinkAvailableError(LogConfigurationError):
    """Raised when none of the built-in default sinks could be produced."""

    def __init__(self, message: str = "No suitable LogSink implementation found."):
        super().__init__(message)


class FlawedHierarchyError(LogConfigurationError):
    """Raised in strict mode when a sink is bound to another copy of LogSink."""
    pass


class FlawedDiscoveryError(LogConfigurationError):
    """Raised in strict mode when a candidate sink fails to load or build."""
    pass


class ScopeRelationshipError(LogConfigurationError):
    """Raised in strict mode when the context scope is unrelated to the engine scope."""
    pass


class SinkAbsentError(LookupError):
    """Base class for candidates that are simply not available in a scope."""
    pass


class SinkNotFoundError(SinkAbsentError):
    """Raised when a scope does not know the requested sink name."""
    pass


class SinkDependencyError(SinkAbsentError):
    """Raised when a sink's module needs a package that is not installed."""
    pass


class SinkInitializationError(SinkAbsentError):
    """Raised when a sink's module fails while it is being imported."""
    pass
