# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Layered configuration for the facade and its sinks.

Values are resolved from, in order: attributes set programmatically on the
factory, the process environment, and the highest-priority
``logfacade.properties`` file found on ``sys.path``.
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from . import levels
from .date_format import DEFAULT_DATE_TIME_FORMAT, DateTimeFormatter
from .diagnostics import log_diagnostic
from .properties import load_configuration_file

PROPERTIES_FILE_NAME = "logfacade.properties"

SINK_CLASS_KEY = "copilot_logfacade.LogSink"
ALLOW_FLAWED_CONTEXT_KEY = "copilot_logfacade.LogSink.allowFlawedContext"
ALLOW_FLAWED_DISCOVERY_KEY = "copilot_logfacade.LogSink.allowFlawedDiscovery"
ALLOW_FLAWED_HIERARCHY_KEY = "copilot_logfacade.LogSink.allowFlawedHierarchy"

SINK_PREFIX = "copilot_logfacade.sink."
SHOW_LOG_NAME_KEY = SINK_PREFIX + "showlogname"
SHOW_SHORT_LOG_NAME_KEY = SINK_PREFIX + "showShortLogname"
SHOW_DATE_TIME_KEY = SINK_PREFIX + "showdatetime"
DATE_TIME_FORMAT_KEY = SINK_PREFIX + "dateTimeFormat"
SHOW_LEVEL_KEY = SINK_PREFIX + "showlevel"
SHOW_SHORT_TAG_KEY = SINK_PREFIX + "showShortTag"
CATEGORY_LEVEL_PREFIX = SINK_PREFIX + "log."
DEFAULT_LEVEL_KEY = SINK_PREFIX + "defaultlog"


class ConfigResolver:
    """Resolve configuration keys from attributes, environment and properties."""

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str] | None = None,
    ):
        """Initialize the resolver.

        Args:
            attributes: Programmatic attributes (checked first); kept by reference
            environ: Environment mapping (defaults to ``os.environ``)
            properties: Values from a property file (checked last)
        """
        self._attributes = attributes if attributes is not None else {}
        self._environ = environ if environ is not None else os.environ
        self._properties = properties if properties is not None else {}

    def resolve(self, key: str) -> str | None:
        """Return the configured value for ``key`` or None."""
        value = self._attributes.get(key)
        if value is not None:
            return str(value)
        value = self._environ.get(key)
        if value is not None:
            return value
        return self._properties.get(key)

    def get(self, key: str, default: str | None = None) -> str | None:
        value = self.resolve(key)
        return default if value is None else value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return True only for a case-insensitive ``"true"`` value."""
        value = self.resolve(key)
        if value is None:
            return default
        return value.strip().lower() == "true"


def resolve_category_level(name: str, lookup: Callable[[str], str | None]) -> int:
    """Find the level for a category, walking up its dotted ancestors.

    ``a.b.C`` checks ``log.a.b.C``, ``log.a.b``, ``log.a`` and then
    ``defaultlog``. Without a match, or with an unrecognized level string,
    the level is INFO.

    Args:
        name: Category (logger) name
        lookup: Key lookup, usually ``ConfigResolver.resolve``

    Returns:
        A level constant from ``copilot_logfacade.levels``
    """
    category = name
    value = lookup(CATEGORY_LEVEL_PREFIX + category)
    while value is None and "." in category:
        category = category.rsplit(".", 1)[0]
        value = lookup(CATEGORY_LEVEL_PREFIX + category)
    if value is None:
        value = lookup(DEFAULT_LEVEL_KEY)
    return levels.parse_level(value, levels.INFO)


@dataclass(frozen=True)
class SinkSettings:
    """Process-wide display settings shared by all sinks."""
    resolver: ConfigResolver
    show_log_name: bool = False
    show_short_name: bool = True
    show_date_time: bool = False
    date_time_format: str = DEFAULT_DATE_TIME_FORMAT
    show_level: bool = False
    show_short_tag: bool = False
    date_formatter: DateTimeFormatter | None = None

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> "SinkSettings":
        """Build settings from a resolver.

        An invalid ``dateTimeFormat`` falls back to the default pattern.
        """
        show_date_time = resolver.get_bool(SHOW_DATE_TIME_KEY, False)
        date_time_format = DEFAULT_DATE_TIME_FORMAT
        formatter = None
        if show_date_time:
            date_time_format = resolver.get(DATE_TIME_FORMAT_KEY, DEFAULT_DATE_TIME_FORMAT)
            try:
                formatter = DateTimeFormatter(date_time_format)
            except ValueError as e:
                log_diagnostic("[CONFIG]", f"Invalid date format '{date_time_format}': {e}")
                date_time_format = DEFAULT_DATE_TIME_FORMAT
                formatter = DateTimeFormatter(date_time_format)

        return cls(
            resolver=resolver,
            show_log_name=resolver.get_bool(SHOW_LOG_NAME_KEY, False),
            show_short_name=resolver.get_bool(SHOW_SHORT_LOG_NAME_KEY, True),
            show_date_time=show_date_time,
            date_time_format=date_time_format,
            show_level=resolver.get_bool(SHOW_LEVEL_KEY, False),
            show_short_tag=resolver.get_bool(SHOW_SHORT_TAG_KEY, False),
            date_formatter=formatter,
        )

    def level_for(self, name: str) -> int:
        return resolve_category_level(name, self.resolver.resolve)


_settings: SinkSettings | None = None
_settings_lock = threading.Lock()


def load_sink_settings(
    environ: Mapping[str, str] | None = None,
    search_path: Iterable[str | Path] | None = None,
) -> SinkSettings:
    """Read sink settings from the environment and ``logfacade.properties``."""
    selected = load_configuration_file(PROPERTIES_FILE_NAME, search_path)
    properties = selected.values if selected is not None else {}
    return SinkSettings.from_resolver(ConfigResolver(environ=environ, properties=properties))


def get_sink_settings() -> SinkSettings:
    """Return the shared sink settings, loading them on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = load_sink_settings()
    return _settings


def set_sink_settings(settings: SinkSettings | None) -> None:
    """Replace the shared sink settings (None forces a reload)."""
    global _settings
    with _settings_lock:
        _settings = settings


def reset_sink_settings() -> None:
    """Drop the cached sink settings so they are read again."""
    set_sink_settings(None)
