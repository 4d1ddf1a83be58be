# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Opt-in diagnostics for the discovery machinery.

Diagnostics are off unless a destination is configured, either with
``configure_diagnostics`` or through the ``copilot_logfacade.diagnostics.dest``
(or ``COPILOT_LOGFACADE_DIAGNOSTICS``) environment variable. The destination is
``STDOUT``, ``STDERR`` or a file path. Messages go through the stdlib logger
named ``copilot_logfacade.diagnostics``, which does not propagate to the host
handlers while a destination is installed.
"""

import logging
import os
import sys
import threading

DIAGNOSTICS_DEST_KEY = "copilot_logfacade.diagnostics.dest"
DIAGNOSTICS_ENV_VAR = "COPILOT_LOGFACADE_DIAGNOSTICS"

logger = logging.getLogger("copilot_logfacade.diagnostics")

_lock = threading.Lock()
_handler: logging.Handler | None = None
# Level and propagate flag of the diagnostics logger before a handler was installed
_saved_logger_state: tuple[int, bool] | None = None
_initialized = False


def _create_handler(dest: str) -> logging.Handler | None:
    if dest.upper() == "STDOUT":
        return logging.StreamHandler(sys.stdout)
    if dest.upper() == "STDERR":
        return logging.StreamHandler(sys.stderr)
    try:
        return logging.FileHandler(dest, mode="a", encoding="utf-8")
    except OSError:
        # Unwritable destination means no diagnostics
        return None


def _install(dest: str | None) -> None:
    global _handler, _saved_logger_state
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
        _handler = None
    if _saved_logger_state is not None:
        logger.setLevel(_saved_logger_state[0])
        logger.propagate = _saved_logger_state[1]
        _saved_logger_state = None
    if not dest:
        return
    handler = _create_handler(dest)
    if handler is None:
        return
    handler.setFormatter(logging.Formatter("%(message)s"))
    _saved_logger_state = (logger.level, logger.propagate)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    # Records go to the destination only, not to host handlers
    logger.propagate = False
    _handler = handler


def _ensure_initialized() -> None:
    global _initialized
    if _initialized:
        return
    with _lock:
        if not _initialized:
            dest = os.environ.get(DIAGNOSTICS_DEST_KEY) or os.environ.get(DIAGNOSTICS_ENV_VAR)
            _install(dest)
            _initialized = True


def configure_diagnostics(dest: str) -> None:
    """Enable diagnostics and send them to ``dest``."""
    global _initialized
    with _lock:
        _install(dest)
        _initialized = True


def disable_diagnostics() -> None:
    """Turn diagnostics off and release the destination handler."""
    global _initialized
    with _lock:
        _install(None)
        _initialized = True


def reset_diagnostics() -> None:
    """Forget programmatic settings so the environment is read again."""
    global _initialized
    with _lock:
        _install(None)
        _initialized = False


def is_diagnostics_enabled() -> bool:
    """Return True if diagnostic messages are being emitted."""
    _ensure_initialized()
    return _handler is not None


def log_diagnostic(prefix: str, message: str, level: int = logging.DEBUG) -> None:
    """Emit a diagnostic message if diagnostics are enabled.

    Args:
        prefix: Identifies the emitting object, e.g. ``[LogSinkFactory@1234]``
        message: The diagnostic text
        level: stdlib level to emit at
    """
    if is_diagnostics_enabled():
        logger.log(level, "%s %s", prefix, message)
