# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Discovery of the sink implementation backing named loggers.

The engine resolves a sink class once and reuses it for every later logger
name. Resolution works like this:

1. If the user named a sink class (``copilot_logfacade.LogSink`` attribute,
   environment variable or property), that class is the only candidate and
   failing to produce it is always fatal.
2. Otherwise the built-in defaults are tried in order and the first usable
   one wins. If none works, discovery fails.

Each candidate is looked up starting at the base scope and, on soft failures,
in the parent scopes. A candidate that is simply absent (name unknown,
dependency missing, module broken at import) never aborts discovery. Other
anomalies are governed by the ``allowFlawed*`` switches: lenient by default
(diagnostic and keep searching), fatal when the switch is ``false``.
"""

import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .config import (
    ALLOW_FLAWED_CONTEXT_KEY,
    ALLOW_FLAWED_DISCOVERY_KEY,
    ALLOW_FLAWED_HIERARCHY_KEY,
    SINK_CLASS_KEY,
    ConfigResolver,
)
from .diagnostics import is_diagnostics_enabled, log_diagnostic
from .errors import (
    FlawedDiscoveryError,
    FlawedHierarchyError,
    LogConfigurationError,
    NoSinkAvailableError,
    ScopeRelationshipError,
    SinkDependencyError,
    SinkInitializationError,
    SinkNotFoundError,
    UserMisconfigurationError,
)
from .scope import SinkScope, lowest_scope, system_scope
from .sink import LogSink

DEFAULT_SINK_CLASS = "copilot_logfacade.platform_sink.PlatformSink"

DEFAULT_SINK_CLASSES = (
    DEFAULT_SINK_CLASS,
    "copilot_logfacade.console_sink.ConsoleSink",
)

FACTORY_SETTER_NAME = "set_log_factory"

# Leading characters of the simple class name compared for suggestions
_SIMILAR_NAME_LENGTH = 5


class DiscoveryState(enum.Enum):
    """Lifecycle of a discovery engine."""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class SinkBinding:
    """A resolved sink implementation.

    Attributes:
        sink_class: The sink type instances are built from
        constructor: Callable taking a logger name and returning a sink
        factory_setter: Optional unbound ``set_log_factory`` to call on new sinks
        scope: Scope the implementation was found in
    """
    sink_class: type
    constructor: Callable[[str], Any]
    factory_setter: Callable[[Any, Any], None] | None
    scope: SinkScope


def similar_default_name(name: str, default: str = DEFAULT_SINK_CLASS) -> str | None:
    """Suggest ``default`` when ``name`` looks like a typo of it.

    The names must have the same module path and simple class names that
    start with the same five characters, ignoring case, without being
    identical.
    """
    if name == default:
        return None
    module, _, simple = name.rpartition(".")
    default_module, _, default_simple = default.rpartition(".")
    if module.lower() != default_module.lower() or len(simple) < _SIMILAR_NAME_LENGTH:
        return None
    if simple[:_SIMILAR_NAME_LENGTH].lower() == default_simple[:_SIMILAR_NAME_LENGTH].lower():
        return default
    return None


class SinkDiscovery:
    """Resolves and caches the sink implementation for a factory."""

    def __init__(
        self,
        config: ConfigResolver,
        own_scope: SinkScope | None = None,
        context_scope: SinkScope | None = None,
        factory: Any = None,
    ):
        """Initialize the discovery engine.

        Args:
            config: Resolver for the sink class and ``allowFlawed*`` switches
            own_scope: Scope the engine belongs to (defaults to the system scope)
            context_scope: Caller-designated scope to start lookups from
            factory: Object handed to sinks through ``set_log_factory``
        """
        self.config = config
        self.own_scope = own_scope if own_scope is not None else system_scope()
        self.context_scope = context_scope
        self.factory = factory
        self.state = DiscoveryState.UNRESOLVED
        self.binding: SinkBinding | None = None
        self.allow_flawed_context = True
        self.allow_flawed_discovery = True
        self.allow_flawed_hierarchy = True
        self._prefix = f"[SinkDiscovery@{id(self)} from {self.own_scope.name}]"

    def _diagnostic(self, message: str, level: int = logging.DEBUG) -> None:
        log_diagnostic(self._prefix, message, level)

    def discover(self, logger_name: str) -> LogSink:
        """Return a new sink for ``logger_name``.

        Once a binding exists its constructor is used directly; otherwise a
        full discovery runs and, on success, the binding is recorded.

        Raises:
            LogConfigurationError: If no sink can be produced
        """
        if self.binding is not None:
            return self.binding.constructor(logger_name)

        self.state = DiscoveryState.RESOLVING
        try:
            self._init_configuration()
            sink = self._discover_implementation(logger_name)
        except Exception:
            self.state = DiscoveryState.FAILED
            raise
        self.state = DiscoveryState.RESOLVED
        return sink

    def _init_configuration(self) -> None:
        """Read the strictness switches; attributes set so far apply."""
        self.allow_flawed_context = self.config.get_bool(ALLOW_FLAWED_CONTEXT_KEY, True)
        self.allow_flawed_discovery = self.config.get_bool(ALLOW_FLAWED_DISCOVERY_KEY, True)
        self.allow_flawed_hierarchy = self.config.get_bool(ALLOW_FLAWED_HIERARCHY_KEY, True)

    def find_user_specified_class(self) -> str | None:
        """Return the explicitly configured sink class name, if any."""
        self._diagnostic(f"Trying to get sink class from configuration key '{SINK_CLASS_KEY}'")
        specified = self.config.resolve(SINK_CLASS_KEY)
        if specified is None:
            return None
        # Whitespace is never valid in a class name
        specified = specified.strip()
        return specified or None

    def _discover_implementation(self, logger_name: str) -> LogSink:
        self._diagnostic("Discovering a LogSink implementation...")

        specified = self.find_user_specified_class()
        if specified is not None:
            self._diagnostic(f"Attempting to load user-specified sink class '{specified}'...")
            sink = self._create_sink_from_class(specified, logger_name)
            if sink is None:
                raise UserMisconfigurationError(specified, similar_default_name(specified))
            return sink

        self._diagnostic("No user-specified LogSink implementation; trying the built-in sinks...")
        for candidate in DEFAULT_SINK_CLASSES:
            sink = self._create_sink_from_class(candidate, logger_name)
            if sink is not None:
                return sink
        raise NoSinkAvailableError()

    def base_scope(self) -> SinkScope:
        """Return the scope lookups start from.

        Raises:
            ScopeRelationshipError: If the context scope is not a descendant
                of the engine's scope and ``allowFlawedContext`` is false
        """
        if self.context_scope is None:
            return self.own_scope

        base = lowest_scope(self.context_scope, self.own_scope)
        if base is None:
            if not self.allow_flawed_context:
                raise ScopeRelationshipError(
                    f"Bad scope hierarchy; the discovery engine belongs to scope "
                    f"'{self.own_scope.name}' which is not related to the context scope "
                    f"'{self.context_scope.name}'."
                )
            self._diagnostic(
                "[WARNING] the context scope is not part of a parent-child "
                "relationship with the discovery engine's scope.",
                logging.WARNING,
            )
            return self.context_scope

        if base is not self.context_scope:
            if not self.allow_flawed_context:
                raise ScopeRelationshipError(
                    f"Bad scope hierarchy; the context scope '{self.context_scope.name}' is an "
                    f"ancestor of the discovery engine's scope '{self.own_scope.name}'."
                )
            self._diagnostic(
                "[WARNING] the context scope is an ancestor of the discovery engine's "
                "scope; it should be the same or a descendant.",
                logging.WARNING,
            )
        return base

    def _create_sink_from_class(self, class_name: str, logger_name: str) -> LogSink | None:
        """Try to build ``class_name`` walking up from the base scope.

        Returns:
            The sink, or None if the candidate is not usable
        """
        self._diagnostic(f"Attempting to instantiate '{class_name}'")
        scope: SinkScope | None = self.base_scope()

        while scope is not None:
            self._diagnostic(f"Trying to load '{class_name}' from scope '{scope.name}'")
            try:
                try:
                    loaded = scope.load(class_name)
                    found_in = scope
                except SinkNotFoundError as e:
                    # Not visible here or in any ancestor lookup this scope does
                    self._diagnostic(f"The sink '{class_name}' is not available via scope '{scope.name}': {e}")
                    if scope is self.own_scope:
                        break
                    try:
                        loaded = self.own_scope.load(class_name)
                        found_in = self.own_scope
                    except SinkNotFoundError as second:
                        self._diagnostic(
                            f"The sink '{class_name}' is not available via the engine scope "
                            f"'{self.own_scope.name}': {second}"
                        )
                        break

                sink = self._construct(loaded, class_name, logger_name)
                if isinstance(sink, LogSink):
                    self._record_binding(class_name, loaded, sink, found_in)
                    return sink

                self._handle_flawed_hierarchy(scope, sink)
            except SinkDependencyError as e:
                self._diagnostic(
                    f"The sink '{class_name}' is missing dependencies when loaded via scope '{scope.name}': {e}"
                )
                break
            except SinkInitializationError as e:
                self._diagnostic(
                    f"The sink '{class_name}' is unable to initialize itself when loaded via scope '{scope.name}': {e}"
                )
                break
            except LogConfigurationError:
                raise
            except Exception as e:
                self._handle_flawed_discovery(class_name, scope, e)

            scope = scope.parent

        return None

    @staticmethod
    def _construct(loaded: Any, class_name: str, logger_name: str) -> Any:
        if not callable(loaded):
            raise TypeError(f"'{class_name}' is not callable")
        try:
            inspect.signature(loaded).bind(logger_name)
        except TypeError as e:
            raise TypeError(f"'{class_name}' cannot be constructed from a single logger name: {e}") from e
        except ValueError:
            # No introspectable signature; let the call decide
            pass
        return loaded(logger_name)

    def _record_binding(self, class_name: str, loaded: Any, sink: LogSink, scope: SinkScope) -> None:
        sink_class = loaded if isinstance(loaded, type) else type(sink)
        setter = getattr(sink_class, FACTORY_SETTER_NAME, None)
        if callable(setter):
            self._diagnostic(f"Found method {FACTORY_SETTER_NAME}(factory) in '{class_name}'")
        else:
            setter = None
            self._diagnostic(
                f"[INFO] '{class_name}' from scope '{scope.name}' does not declare optional method "
                f"{FACTORY_SETTER_NAME}(factory)"
            )
        self.binding = SinkBinding(
            sink_class=sink_class,
            constructor=loaded,
            factory_setter=setter,
            scope=scope,
        )
        self._diagnostic(f"Sink '{class_name}' from scope '{scope.name}' has been selected for use.")

    def _handle_flawed_discovery(self, class_name: str, scope: SinkScope, flaw: Exception) -> None:
        """Report a failure to build a candidate; fatal in strict mode."""
        if is_diagnostics_enabled():
            self._diagnostic(
                f"Could not instantiate sink '{class_name}' from scope '{scope.name}' -- "
                f"{type(flaw).__name__}: {flaw}",
                logging.WARNING,
            )
            cause = flaw.__cause__
            if cause is not None:
                self._diagnostic(f"... caused by {type(cause).__name__}: {cause}", logging.WARNING)

        if not self.allow_flawed_discovery:
            raise FlawedDiscoveryError(
                f"Could not instantiate sink '{class_name}': {type(flaw).__name__}: {flaw}"
            ) from flaw

    def _handle_flawed_hierarchy(self, scope: SinkScope, obj: Any) -> None:
        """Report a built object that is not a LogSink; fatal in strict mode.

        An object whose class derives from some other class named ``LogSink``
        is bound to a second copy of the capability (a hierarchy problem);
        anything else simply does not implement it.
        """
        bad_class = type(obj)
        bad_name = f"{bad_class.__module__}.{bad_class.__qualname__}"
        interface_name = f"{LogSink.__module__}.{LogSink.__qualname__}"
        implements_other_copy = any(
            base.__name__ == LogSink.__name__ and base is not LogSink for base in bad_class.__mro__
        )

        if implements_other_copy:
            self._diagnostic(
                f"Class '{bad_name}' was found in scope '{scope.name}'. It is bound to a LogSink "
                f"interface which is not '{interface_name}'"
            )
            if not self.allow_flawed_hierarchy:
                raise FlawedHierarchyError(
                    "Terminating logging for this context due to bad log hierarchy. "
                    f"You have more than one version of '{interface_name}' visible."
                )
            self._diagnostic(
                f"Warning: bad log hierarchy. You have more than one version of '{interface_name}' visible.",
                logging.WARNING,
            )
            return

        if not self.allow_flawed_discovery:
            raise FlawedDiscoveryError(
                "Terminating logging for this context. "
                f"Sink class '{bad_name}' does not implement the LogSink interface."
            )
        self._diagnostic(
            f"[WARNING] Sink class '{bad_name}' does not implement the LogSink interface.",
            logging.WARNING,
        )
