# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Test fixtures for copilot_logfacade."""

from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path

import pytest

from copilot_logfacade.config import ConfigResolver, SinkSettings, reset_sink_settings, set_sink_settings
from copilot_logfacade.diagnostics import reset_diagnostics
from copilot_logfacade.factory import reset_factory


@pytest.fixture(autouse=True)
def isolated_logging_state(monkeypatch: pytest.MonkeyPatch):
    """Reset process-wide state and hide facade settings in the environment."""
    for key in list(os.environ):
        if key.startswith("copilot_logfacade.") or key == "COPILOT_LOGFACADE_DIAGNOSTICS":
            monkeypatch.delenv(key, raising=False)

    reset_factory()
    reset_diagnostics()
    # Sinks read settings from an empty configuration unless a test installs its own
    set_sink_settings(SinkSettings.from_resolver(ConfigResolver(environ={})))
    yield
    reset_factory()
    reset_diagnostics()
    reset_sink_settings()


@pytest.fixture
def install_settings():
    """Install sink settings built from the given key/value pairs."""

    def _install(**values: str) -> SinkSettings:
        settings = SinkSettings.from_resolver(ConfigResolver(environ={}, properties=values))
        set_sink_settings(settings)
        return settings

    return _install


SINK_MODULES = {
    "fixture_sinks": '''
        from abc import ABC, abstractmethod

        from copilot_logfacade.silent_sink import SilentSink


        class GoodSink(SilentSink):
            pass


        class NoNameSink(SilentSink):
            def __init__(self):
                super().__init__("fixed")


        class ExplodingSink(SilentSink):
            def __init__(self, name):
                raise RuntimeError(f"cannot build {name}")


        class NotASink:
            def __init__(self, name):
                self.name = name


        class LogSink(ABC):
            @abstractmethod
            def info(self, message, exc=None):
                pass


        class ForeignSink(LogSink):
            def __init__(self, name):
                self.name = name

            def info(self, message, exc=None):
                pass
    ''',
    "fixture_missing_dependency_sink": '''
        import copilot_logfacade_test_not_installed

        from copilot_logfacade.silent_sink import SilentSink


        class Sink(SilentSink):
            pass
    ''',
    "fixture_broken_sink": '''
        raise RuntimeError("broken at import time")
    ''',
}


@pytest.fixture
def sink_modules(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write importable sink modules to a temporary directory on sys.path."""
    for name, source in SINK_MODULES.items():
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source), encoding="utf-8")
        monkeypatch.delitem(sys.modules, name, raising=False)
    monkeypatch.syspath_prepend(str(tmp_path))
    yield tmp_path
    for name in SINK_MODULES:
        sys.modules.pop(name, None)
