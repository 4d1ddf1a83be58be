# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Severity levels shared by the facade and its sinks."""

import logging
import threading

# Levels are numerically ordered so enablement is a simple comparison
ALL = 0
TRACE = 1
DEBUG = 2
INFO = 3
WARN = 4
ERROR = 5
FATAL = 6
OFF = 7

STDLIB_TRACE = 5

_NAMES = {
    TRACE: "TRACE",
    DEBUG: "DEBUG",
    INFO: "INFO",
    WARN: "WARN",
    ERROR: "ERROR",
    FATAL: "FATAL",
}

_BY_TEXT = {
    "all": ALL,
    "trace": TRACE,
    "debug": DEBUG,
    "info": INFO,
    "warn": WARN,
    "error": ERROR,
    "fatal": FATAL,
    "off": OFF,
}

_STDLIB_LEVELS = {
    TRACE: STDLIB_TRACE,
    DEBUG: logging.DEBUG,
    INFO: logging.INFO,
    WARN: logging.WARNING,
    ERROR: logging.ERROR,
    FATAL: logging.CRITICAL,
}

_trace_lock = threading.Lock()
_trace_registered = False


def register_trace_level() -> None:
    """Name the stdlib TRACE level, once per process."""
    global _trace_registered
    if _trace_registered:
        return
    with _trace_lock:
        if not _trace_registered:
            logging.addLevelName(STDLIB_TRACE, "TRACE")
            _trace_registered = True


def parse_level(text: str | None, default: int | None = None) -> int | None:
    """Parse a level name such as ``"debug"`` or ``"OFF"``.

    Args:
        text: Level text (case-insensitive)
        default: Value returned when the text is absent or unrecognized

    Returns:
        One of the level constants, or ``default``
    """
    if text is None:
        return default
    return _BY_TEXT.get(text.strip().lower(), default)


def level_name(level: int) -> str:
    """Return the display name of a level (``"INFO"``)."""
    return _NAMES[level]


def to_stdlib_level(level: int) -> int:
    """Map a facade level onto the stdlib ``logging`` scale."""
    return _STDLIB_LEVELS[level]
