# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Lookup scopes in which sink classes are resolved by name.

A scope maps dotted class names (``package.module.ClassName``) to factories.
Scopes form a parent chain: discovery starts at one scope and may ascend to
its parents. An *importable* scope also resolves names it has no registry
entry for by importing the module with ``importlib``.
"""

import importlib
import threading
from typing import Any, Callable, Iterator

from .errors import SinkDependencyError, SinkInitializationError, SinkNotFoundError

SinkFactory = Callable[[str], Any]


def import_sink_class(class_name: str) -> SinkFactory:
    """Import ``module.Attr`` and return the attribute.

    Raises:
        SinkNotFoundError: The module or attribute does not exist
        SinkDependencyError: The module imports something that is missing
        SinkInitializationError: The module raised while being imported
    """
    module_name, _, attr = class_name.rpartition(".")
    if not module_name or not attr:
        raise SinkNotFoundError(f"'{class_name}' is not a dotted class name")

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        missing = e.name or ""
        if missing and (module_name == missing or module_name.startswith(missing + ".")):
            raise SinkNotFoundError(f"No module named '{module_name}'") from e
        raise SinkDependencyError(
            f"Module '{module_name}' requires missing module '{missing}'"
        ) from e
    except ImportError as e:
        raise SinkDependencyError(f"Module '{module_name}' failed to import: {e}") from e
    except Exception as e:
        raise SinkInitializationError(
            f"Module '{module_name}' failed to initialize: {type(e).__name__}: {e}"
        ) from e

    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise SinkNotFoundError(f"Module '{module_name}' has no attribute '{attr}'") from e


class SinkScope:
    """A named lookup context for sink classes."""

    def __init__(
        self,
        name: str,
        registry: dict[str, SinkFactory] | None = None,
        parent: "SinkScope | None" = None,
        importable: bool = False,
    ):
        """Initialize the scope.

        Args:
            name: Display name used in diagnostics
            registry: Initial class-name to factory mapping
            parent: Parent scope, consulted when discovery ascends
            importable: Resolve unregistered names by importing them
        """
        self.name = name
        self.parent = parent
        self.importable = importable
        self._registry: dict[str, SinkFactory] = dict(registry or {})
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"SinkScope({self.name!r})"

    def register(self, class_name: str, factory: SinkFactory) -> None:
        """Make ``factory`` resolvable as ``class_name`` in this scope."""
        with self._lock:
            self._registry[class_name] = factory

    def unregister(self, class_name: str) -> None:
        with self._lock:
            self._registry.pop(class_name, None)

    def registered_names(self) -> list[str]:
        with self._lock:
            return sorted(self._registry)

    def load(self, class_name: str) -> SinkFactory:
        """Resolve ``class_name`` in this scope only (no parent lookup).

        Raises:
            SinkNotFoundError: Name not known to this scope
            SinkDependencyError: The sink's module has missing dependencies
            SinkInitializationError: The sink's module failed to import
        """
        with self._lock:
            factory = self._registry.get(class_name)
        if factory is not None:
            return factory
        if self.importable:
            return import_sink_class(class_name)
        raise SinkNotFoundError(f"'{class_name}' is not registered in scope '{self.name}'")

    def ancestors(self) -> Iterator["SinkScope"]:
        """Yield this scope followed by its parents."""
        scope: SinkScope | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def is_ancestor_of(self, other: "SinkScope") -> bool:
        """Return True if this scope is ``other`` or one of its parents."""
        return any(scope is self for scope in other.ancestors())


def lowest_scope(first: SinkScope | None, second: SinkScope | None) -> SinkScope | None:
    """Return whichever of two related scopes is the descendant.

    Returns:
        ``first`` if ``second`` is among its ancestors, ``second`` if the
        reverse holds, or None when neither is an ancestor of the other
    """
    if first is None:
        return second
    if second is None:
        return first
    if second.is_ancestor_of(first):
        return first
    if first.is_ancestor_of(second):
        return second
    return None


_system_scope: SinkScope | None = None
_system_scope_lock = threading.Lock()


def system_scope() -> SinkScope:
    """Return the scope the discovery engine itself belongs to.

    It is importable and has the built-in sinks registered under their
    dotted class names.
    """
    global _system_scope
    if _system_scope is None:
        with _system_scope_lock:
            if _system_scope is None:
                from .console_sink import ConsoleSink
                from .platform_sink import PlatformSink
                from .silent_sink import SilentSink

                _system_scope = SinkScope(
                    "system",
                    registry={
                        "copilot_logfacade.console_sink.ConsoleSink": ConsoleSink,
                        "copilot_logfacade.platform_sink.PlatformSink": PlatformSink,
                        "copilot_logfacade.silent_sink.SilentSink": SilentSink,
                    },
                    importable=True,
                )
    return _system_scope
