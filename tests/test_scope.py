# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for lookup scopes and class import classification."""

import pytest

from copilot_logfacade import (
    ConsoleSink,
    PlatformSink,
    SilentSink,
    SinkDependencyError,
    SinkInitializationError,
    SinkNotFoundError,
    SinkScope,
    system_scope,
)
from copilot_logfacade.errors import SinkAbsentError
from copilot_logfacade.scope import import_sink_class, lowest_scope


class TestImportSinkClass:
    """Tests for import_sink_class."""

    def test_imports_existing_class(self):
        """Test importing a class by dotted name."""
        assert import_sink_class("copilot_logfacade.console_sink.ConsoleSink") is ConsoleSink

    def test_undotted_name_is_not_found(self):
        """Test that a bare name cannot be imported."""
        with pytest.raises(SinkNotFoundError):
            import_sink_class("ConsoleSink")

    def test_missing_module_is_not_found(self):
        """Test that a missing module is reported as not found."""
        with pytest.raises(SinkNotFoundError):
            import_sink_class("no_such_package.sinks.Sink")

    def test_missing_submodule_is_not_found(self):
        """Test that a missing submodule of an existing package is not found."""
        with pytest.raises(SinkNotFoundError):
            import_sink_class("copilot_logfacade.no_such_module.Sink")

    def test_missing_attribute_is_not_found(self):
        """Test that a missing class in an existing module is not found."""
        with pytest.raises(SinkNotFoundError, match="has no attribute"):
            import_sink_class("copilot_logfacade.console_sink.NoSuchSink")

    def test_missing_dependency(self, sink_modules):
        """Test that a module importing an absent package is a dependency problem."""
        with pytest.raises(SinkDependencyError, match="copilot_logfacade_test_not_installed"):
            import_sink_class("fixture_missing_dependency_sink.Sink")

    def test_module_raising_at_import(self, sink_modules):
        """Test that a module failing during import is an initialization problem."""
        with pytest.raises(SinkInitializationError, match="broken at import time") as exc_info:
            import_sink_class("fixture_broken_sink.Sink")

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_absence_errors_share_a_base(self):
        """Test that every absence classification is a SinkAbsentError."""
        for error in (SinkNotFoundError, SinkDependencyError, SinkInitializationError):
            assert issubclass(error, SinkAbsentError)
            assert issubclass(error, LookupError)


class TestSinkScope:
    """Tests for SinkScope registry and parent chain."""

    def test_registered_factory_is_returned(self):
        """Test loading a registered name."""
        scope = SinkScope("app", registry={"app.Sink": SilentSink})

        assert scope.load("app.Sink") is SilentSink

    def test_register_and_unregister(self):
        """Test modifying the registry."""
        scope = SinkScope("app")

        scope.register("b.Sink", SilentSink)
        scope.register("a.Sink", ConsoleSink)
        assert scope.registered_names() == ["a.Sink", "b.Sink"]

        scope.unregister("a.Sink")
        scope.unregister("missing.Sink")
        assert scope.registered_names() == ["b.Sink"]

    def test_unknown_name_in_plain_scope(self):
        """Test that a non-importable scope does not import."""
        scope = SinkScope("app")

        with pytest.raises(SinkNotFoundError, match="not registered in scope 'app'"):
            scope.load("copilot_logfacade.console_sink.ConsoleSink")

    def test_importable_scope_imports(self):
        """Test that an importable scope falls back to importing."""
        scope = SinkScope("app", importable=True)

        assert scope.load("copilot_logfacade.silent_sink.SilentSink") is SilentSink

    def test_registry_wins_over_import(self):
        """Test that a registry entry shadows the importable class."""
        scope = SinkScope(
            "app",
            registry={"copilot_logfacade.console_sink.ConsoleSink": SilentSink},
            importable=True,
        )

        assert scope.load("copilot_logfacade.console_sink.ConsoleSink") is SilentSink

    def test_load_does_not_consult_parent(self):
        """Test that load() only looks at the scope itself."""
        parent = SinkScope("parent", registry={"app.Sink": SilentSink})
        child = SinkScope("child", parent=parent)

        with pytest.raises(SinkNotFoundError):
            child.load("app.Sink")

    def test_ancestors(self):
        """Test walking the parent chain."""
        root = SinkScope("root")
        middle = SinkScope("middle", parent=root)
        leaf = SinkScope("leaf", parent=middle)

        assert list(leaf.ancestors()) == [leaf, middle, root]
        assert root.is_ancestor_of(leaf)
        assert leaf.is_ancestor_of(leaf)
        assert not leaf.is_ancestor_of(root)


class TestLowestScope:
    """Tests for lowest_scope."""

    def test_descendant_is_returned(self):
        root = SinkScope("root")
        leaf = SinkScope("leaf", parent=root)

        assert lowest_scope(leaf, root) is leaf
        assert lowest_scope(root, leaf) is leaf

    def test_same_scope(self):
        scope = SinkScope("one")

        assert lowest_scope(scope, scope) is scope

    def test_unrelated_scopes(self):
        assert lowest_scope(SinkScope("a"), SinkScope("b")) is None

    def test_missing_scope(self):
        scope = SinkScope("one")

        assert lowest_scope(None, scope) is scope
        assert lowest_scope(scope, None) is scope


class TestSystemScope:
    """Tests for the built-in system scope."""

    def test_is_singleton(self):
        assert system_scope() is system_scope()

    def test_builtin_sinks_registered(self):
        """Test that the built-in sinks are available without importing."""
        scope = system_scope()

        assert scope.importable
        assert scope.parent is None
        assert scope.load("copilot_logfacade.platform_sink.PlatformSink") is PlatformSink
        assert "copilot_logfacade.silent_sink.SilentSink" in scope.registered_names()
