# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Tests for the sink factory and its instance cache."""

import threading

import pytest

from copilot_logfacade import (
    SINK_CLASS_KEY,
    ConsoleSink,
    DiscoveryState,
    LogConfigurationError,
    LogSinkFactory,
    Logger,
    PlatformSink,
    SilentSink,
    SinkScope,
    UserMisconfigurationError,
    get_factory,
    get_logger,
    release_all,
    system_scope,
)

SILENT = "copilot_logfacade.silent_sink.SilentSink"


class Widget:
    """Class used to derive a logger name."""


class TestInstanceCache:
    """Tests for get_instance caching and release."""

    def test_same_name_returns_same_instance(self):
        """Test that repeated requests for a name return the identical sink."""
        factory = LogSinkFactory(environ={})

        first = factory.get_instance("com.acme.Widget")
        second = factory.get_instance("com.acme.Widget")

        assert first is second

    def test_different_names_return_distinct_instances(self):
        """Test that different names get different sinks."""
        factory = LogSinkFactory(environ={})

        first = factory.get_instance("com.acme.Widget")
        second = factory.get_instance("com.acme.Gadget")

        assert first is not second
        assert first.name == "com.acme.Widget"
        assert second.name == "com.acme.Gadget"

    def test_class_argument_uses_qualified_name(self):
        """Test that a class is mapped to module.QualName."""
        factory = LogSinkFactory(environ={})

        sink = factory.get_instance(Widget)

        assert sink.name == f"{__name__}.Widget"
        assert factory.get_instance(f"{__name__}.Widget") is sink

    def test_release_drops_instances_but_keeps_binding(self):
        """Test that release() forces new instances with the same class."""
        factory = LogSinkFactory(environ={})
        before = factory.get_instance("com.acme.Widget")
        resolved = factory.resolved_sink_class

        factory.release()
        after = factory.get_instance("com.acme.Widget")

        assert after is not before
        assert factory.resolved_sink_class is resolved
        assert factory.state == DiscoveryState.RESOLVED

    def test_release_keeps_attributes(self):
        """Test that attributes survive release()."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute("custom", "value")

        factory.release()

        assert factory.get_attribute("custom") == "value"

    def test_concurrent_requests_share_one_instance(self):
        """Test that concurrent get_instance calls for a name agree."""
        factory = LogSinkFactory(environ={})
        results = []

        def worker():
            results.append(factory.get_instance("com.acme.Shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)


class TestAttributes:
    """Tests for factory attribute handling."""

    def test_set_and_get_attribute(self):
        """Test storing an attribute."""
        factory = LogSinkFactory(environ={})

        factory.set_attribute("key", "value")

        assert factory.get_attribute("key") == "value"
        assert factory.get_attribute_names() == {"key"}

    def test_set_attribute_none_removes(self):
        """Test that setting None removes the attribute."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute("key", "value")

        factory.set_attribute("key", None)

        assert factory.get_attribute("key") is None
        assert factory.get_attribute_names() == set()

    def test_remove_attribute(self):
        """Test removing an attribute, including a missing one."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute("key", "value")

        factory.remove_attribute("key")
        factory.remove_attribute("missing")

        assert factory.get_attribute_names() == set()

    def test_attribute_pins_sink_class(self):
        """Test that the sink class attribute selects the sink."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, SILENT)

        sink = factory.get_instance("com.acme.Widget")

        assert isinstance(sink, SilentSink)

    def test_attribute_takes_precedence_over_environment(self):
        """Test that attributes win over environment variables."""
        factory = LogSinkFactory(environ={SINK_CLASS_KEY: "copilot_logfacade.console_sink.ConsoleSink"})
        factory.set_attribute(SINK_CLASS_KEY, SILENT)

        assert isinstance(factory.get_instance("x"), SilentSink)

    def test_environment_pins_sink_class(self):
        """Test that the environment can select the sink."""
        factory = LogSinkFactory(environ={SINK_CLASS_KEY: "copilot_logfacade.console_sink.ConsoleSink"})

        sink = factory.get_instance("x")

        assert type(sink) is ConsoleSink

    def test_properties_pin_sink_class(self):
        """Test that a property file value is used when nothing else is set."""
        factory = LogSinkFactory(environ={}, properties={SINK_CLASS_KEY: SILENT})

        assert isinstance(factory.get_instance("x"), SilentSink)

    def test_set_attribute_after_resolution_does_not_rebind(self):
        """Test that changing the sink class after resolution has no effect."""
        factory = LogSinkFactory(environ={})
        first = factory.get_instance("com.acme.Widget")

        factory.set_attribute(SINK_CLASS_KEY, SILENT)
        second = factory.get_instance("com.acme.Gadget")

        assert type(first) is PlatformSink
        assert type(second) is PlatformSink
        assert factory.resolved_sink_class is PlatformSink
        assert factory.get_attribute(SINK_CLASS_KEY) == SILENT


class TestMisconfiguration:
    """Tests for explicitly configured sinks that cannot be produced."""

    def test_missing_pinned_class_is_fatal(self):
        """Test that a missing pinned class never falls back to the defaults."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, "com.example.logging.NoSuchSink")

        with pytest.raises(UserMisconfigurationError, match="com.example.logging.NoSuchSink") as exc_info:
            factory.get_instance("com.acme.Widget")

        assert "Did you mean" not in str(exc_info.value)
        assert factory.state == DiscoveryState.FAILED
        assert factory.resolved_sink_class is None

    def test_similar_name_gets_suggestion(self):
        """Test that a near miss of the default sink name is pointed out."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, "copilot_logfacade.platform_sink.PlatformSinc")

        with pytest.raises(UserMisconfigurationError) as exc_info:
            factory.get_instance("com.acme.Widget")

        assert "Did you mean 'copilot_logfacade.platform_sink.PlatformSink'?" in str(exc_info.value)
        assert exc_info.value.suggestion == "copilot_logfacade.platform_sink.PlatformSink"

    def test_similar_name_ignores_case(self):
        """Test that the suggestion check is case-insensitive."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, "Copilot_LogFacade.Platform_Sink.PLATFORMSINK")

        with pytest.raises(UserMisconfigurationError, match="Did you mean"):
            factory.get_instance("com.acme.Widget")

    def test_other_class_in_default_module_gets_no_suggestion(self):
        """Test that a different class name in the default module is not pointed at the default."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, "copilot_logfacade.platform_sink.Foo")

        with pytest.raises(UserMisconfigurationError) as exc_info:
            factory.get_instance("com.acme.Widget")

        assert "Did you mean" not in str(exc_info.value)
        assert exc_info.value.suggestion is None

    def test_pinned_name_is_trimmed(self):
        """Test that whitespace around the pinned class name is ignored."""
        factory = LogSinkFactory(environ={SINK_CLASS_KEY: f"  {SILENT}\n"})

        assert isinstance(factory.get_instance("x"), SilentSink)

    def test_failed_discovery_can_be_retried(self):
        """Test that a failure is not cached and a later call may succeed."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, "com.example.logging.NoSuchSink")
        with pytest.raises(UserMisconfigurationError):
            factory.get_instance("x")

        factory.set_attribute(SINK_CLASS_KEY, SILENT)
        sink = factory.get_instance("x")

        assert isinstance(sink, SilentSink)
        assert factory.state == DiscoveryState.RESOLVED


class TestFactoryHook:
    """Tests for the optional set_log_factory hook."""

    def test_hook_receives_factory(self):
        """Test that sinks declaring set_log_factory receive the factory."""
        factory = LogSinkFactory(environ={})
        factory.set_attribute(SINK_CLASS_KEY, SILENT)

        first = factory.get_instance("a")
        second = factory.get_instance("b")

        assert first.factory is factory
        assert second.factory is factory

    def test_sinks_without_hook_are_fine(self):
        """Test that the hook is optional."""
        factory = LogSinkFactory(environ={})

        factory.get_instance("a")

        assert factory.discovery.binding.factory_setter is None

    def test_constructor_failure_after_binding_is_wrapped(self):
        """Test that errors from the cached constructor become LogConfigurationError."""

        class FlakySink(SilentSink):
            calls = 0

            def __init__(self, name):
                FlakySink.calls += 1
                if FlakySink.calls > 1:
                    raise RuntimeError("backend went away")
                super().__init__(name)

        scope = SinkScope("app", registry={"app.FlakySink": FlakySink}, parent=system_scope())
        factory = LogSinkFactory(environ={}, context_scope=scope)
        factory.set_attribute(SINK_CLASS_KEY, "app.FlakySink")
        factory.get_instance("first")

        with pytest.raises(LogConfigurationError, match="backend went away") as exc_info:
            factory.get_instance("second")

        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestLoggers:
    """Tests for Logger creation through the factory."""

    def test_get_logger_wraps_cached_sink(self):
        """Test that get_logger returns a cached Logger over the cached sink."""
        factory = LogSinkFactory(environ={})

        logger = factory.get_logger("com.acme.Widget")

        assert isinstance(logger, Logger)
        assert logger.sink is factory.get_instance("com.acme.Widget")
        assert factory.get_logger("com.acme.Widget") is logger

    def test_release_drops_loggers(self):
        """Test that release() also forgets Loggers."""
        factory = LogSinkFactory(environ={})
        before = factory.get_logger("com.acme.Widget")

        factory.release()

        assert factory.get_logger("com.acme.Widget") is not before


class TestProcessFactory:
    """Tests for the process-wide factory helpers."""

    def test_get_factory_is_singleton(self):
        """Test that get_factory always returns the same object."""
        assert get_factory() is get_factory()

    def test_get_factory_concurrent_first_access(self):
        """Test that racing first calls still create a single factory."""
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(get_factory())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(result is results[0] for result in results)

    def test_get_logger_usage_pattern(self):
        """Test the intended usage: module-level get_logger(__name__)."""
        logger = get_logger(__name__)

        assert isinstance(logger, Logger)
        assert logger is get_logger(__name__)
        logger.info("Test message %s", "value")  # Should not raise

    def test_release_all(self):
        """Test that release_all drops process-wide instances."""
        before = get_logger("com.acme.Widget")

        release_all()

        assert get_logger("com.acme.Widget") is not before
