# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Copilot-for-Consensus Logging Facade.

A small logging facade: application code asks for a named logger and logs at
six levels (trace, debug, info, warn, error, fatal), while the sink that
actually handles the records is discovered at runtime.

By default the platform sink (the stdlib ``logging`` tree) is used, falling
back to the console sink. A specific sink can be pinned with the
``copilot_logfacade.LogSink`` attribute, environment variable or property.

Example:
    >>> from copilot_logfacade import get_logger
    >>>
    >>> logger = get_logger("com.acme.Widget")
    >>> logger.info("Service started with %d workers", 4)
    >>>
    >>> # Pin the in-memory sink for testing
    >>> from copilot_logfacade import LogSinkFactory
    >>> factory = LogSinkFactory()
    >>> factory.set_attribute("copilot_logfacade.LogSink", "copilot_logfacade.silent_sink.SilentSink")
    >>> factory.get_logger("test").info("Test message")
"""

__version__ = "0.1.0"

from .config import (
    ALLOW_FLAWED_CONTEXT_KEY,
    ALLOW_FLAWED_DISCOVERY_KEY,
    ALLOW_FLAWED_HIERARCHY_KEY,
    SINK_CLASS_KEY,
    ConfigResolver,
    SinkSettings,
    get_sink_settings,
    reset_sink_settings,
)
from .console_sink import ConsoleSink
from .diagnostics import configure_diagnostics, disable_diagnostics
from .discovery import DEFAULT_SINK_CLASSES, DiscoveryState, SinkBinding, SinkDiscovery
from .errors import (
    FlawedDiscoveryError,
    FlawedHierarchyError,
    LogConfigurationError,
    NoSinkAvailableError,
    ScopeRelationshipError,
    SinkAbsentError,
    SinkDependencyError,
    SinkInitializationError,
    SinkNotFoundError,
    UserMisconfigurationError,
)
from .factory import LogSinkFactory, get_factory, get_logger, release_all, reset_factory
from .logger import Logger
from .platform_sink import PlatformSink
from .scope import SinkScope, system_scope
from .silent_sink import SilentSink
from .sink import LogSink

__all__ = [
    "__version__",
    # Facade
    "Logger",
    "LogSinkFactory",
    "get_factory",
    "get_logger",
    "release_all",
    "reset_factory",
    # Sinks
    "LogSink",
    "ConsoleSink",
    "PlatformSink",
    "SilentSink",
    # Discovery
    "DEFAULT_SINK_CLASSES",
    "DiscoveryState",
    "SinkBinding",
    "SinkDiscovery",
    "SinkScope",
    "system_scope",
    # Configuration
    "ALLOW_FLAWED_CONTEXT_KEY",
    "ALLOW_FLAWED_DISCOVERY_KEY",
    "ALLOW_FLAWED_HIERARCHY_KEY",
    "SINK_CLASS_KEY",
    "ConfigResolver",
    "SinkSettings",
    "get_sink_settings",
    "reset_sink_settings",
    "configure_diagnostics",
    "disable_diagnostics",
    # Errors
    "LogConfigurationError",
    "UserMisconfigurationError",
    "NoSinkAvailableError",
    "FlawedHierarchyError",
    "FlawedDiscoveryError",
    "ScopeRelationshipError",
    "SinkAbsentError",
    "SinkNotFoundError",
    "SinkDependencyError",
    "SinkInitializationError",
]
