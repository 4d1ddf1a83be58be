# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Factory that caches one sink and one Logger per name."""

import threading
from typing import Any, Mapping

from .config import PROPERTIES_FILE_NAME, ConfigResolver
from .diagnostics import log_diagnostic
from .discovery import DiscoveryState, SinkDiscovery
from .errors import LogConfigurationError
from .logger import Logger
from .properties import load_configuration_file
from .scope import SinkScope
from .sink import LogSink


def logger_name(name_or_class: str | type) -> str:
    """Return the logger name for a string or a class.

    Classes are named by their fully-qualified name (``module.QualName``).
    """
    if isinstance(name_or_class, type):
        return f"{name_or_class.__module__}.{name_or_class.__qualname__}"
    return str(name_or_class)


class LogSinkFactory:
    """Builds sinks through discovery and caches them by logger name.

    Attributes may be set before the first sink is built to configure
    discovery (e.g. ``copilot_logfacade.LogSink`` to pin the sink class).
    Setting them afterwards is accepted but has no effect on the binding.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str] | None = None,
        own_scope: SinkScope | None = None,
        context_scope: SinkScope | None = None,
    ):
        """Initialize the factory.

        Args:
            environ: Environment mapping (defaults to ``os.environ``)
            properties: Values from ``logfacade.properties``, consulted last
            own_scope: Scope of the discovery engine (defaults to the system scope)
            context_scope: Caller-designated scope to start sink lookups from
        """
        self._attributes: dict[str, Any] = {}
        self._instances: dict[str, LogSink] = {}
        self._loggers: dict[str, Logger] = {}
        self._lock = threading.RLock()
        self.config = ConfigResolver(self._attributes, environ, properties)
        self.discovery = SinkDiscovery(
            self.config,
            own_scope=own_scope,
            context_scope=context_scope,
            factory=self,
        )
        self._prefix = f"[LogSinkFactory@{id(self)}]"
        log_diagnostic(self._prefix, "Instance created.")

    @property
    def state(self) -> DiscoveryState:
        return self.discovery.state

    @property
    def resolved_sink_class(self) -> type | None:
        """The sink class in use, or None before the first successful discovery."""
        binding = self.discovery.binding
        return binding.sink_class if binding is not None else None

    def get_instance(self, name_or_class: str | type) -> LogSink:
        """Return the sink for a name, building it on first request.

        Raises:
            LogConfigurationError: If no sink can be produced
        """
        name = logger_name(name_or_class)
        with self._lock:
            instance = self._instances.get(name)
            if instance is None:
                instance = self._new_instance(name)
                self._instances[name] = instance
            return instance

    def get_logger(self, name_or_class: str | type) -> Logger:
        """Return the Logger facade for a name, building it on first request."""
        name = logger_name(name_or_class)
        with self._lock:
            logger = self._loggers.get(name)
            if logger is None:
                sink = self.get_instance(name)
                logger = Logger(name, sink)
                self._loggers[name] = logger
                log_diagnostic(
                    self._prefix,
                    f"[{name}] enabled: trace={sink.is_trace_enabled()} debug={sink.is_debug_enabled()} "
                    f"info={sink.is_info_enabled()} warn={sink.is_warn_enabled()} "
                    f"error={sink.is_error_enabled()} fatal={sink.is_fatal_enabled()}",
                )
            return logger

    def _new_instance(self, name: str) -> LogSink:
        try:
            instance = self.discovery.discover(name)
            binding = self.discovery.binding
            if binding is not None and binding.factory_setter is not None:
                binding.factory_setter(instance, self)
            return instance
        except LogConfigurationError:
            # Discovery already reported the problem
            raise
        except Exception as e:
            raise LogConfigurationError(
                f"Unable to create sink for '{name}': {type(e).__name__}: {e}"
            ) from e

    def get_attribute(self, name: str) -> Any:
        with self._lock:
            return self._attributes.get(name)

    def get_attribute_names(self) -> set[str]:
        with self._lock:
            return set(self._attributes)

    def set_attribute(self, name: str, value: Any) -> None:
        """Set a configuration attribute; None removes it.

        Attributes set after the sink class has been resolved are stored but
        do not change the binding or existing sinks.
        """
        with self._lock:
            if self.discovery.binding is not None:
                log_diagnostic(self._prefix, "set_attribute: call too late; configuration already performed.")
            if value is None:
                self._attributes.pop(name, None)
            else:
                self._attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        with self._lock:
            self._attributes.pop(name, None)

    def release(self) -> None:
        """Drop every cached sink and Logger; the binding and attributes stay."""
        log_diagnostic(self._prefix, "Releasing all known loggers")
        with self._lock:
            self._instances.clear()
            self._loggers.clear()


_factory: LogSinkFactory | None = None
_factory_lock = threading.Lock()


def get_factory() -> LogSinkFactory:
    """Return the process-wide factory, creating it on first use.

    The factory reads ``logfacade.properties`` from ``sys.path`` once.
    """
    global _factory
    if _factory is None:
        with _factory_lock:
            if _factory is None:
                selected = load_configuration_file(PROPERTIES_FILE_NAME)
                _factory = LogSinkFactory(properties=selected.values if selected is not None else None)
    return _factory


def get_logger(name_or_class: str | type) -> Logger:
    """Return the Logger for a name or class from the process-wide factory.

    Example:
        >>> from copilot_logfacade import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Service started on port %d", 8080)
    """
    return get_factory().get_logger(name_or_class)


def release_all() -> None:
    """Release all cached loggers of the process-wide factory."""
    with _factory_lock:
        factory = _factory
    if factory is not None:
        factory.release()


def reset_factory() -> None:
    """Discard the process-wide factory (mainly for tests)."""
    global _factory
    with _factory_lock:
        if _factory is not None:
            _factory.release()
        _factory = None
