# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Platform sink that forwards records to the stdlib logging tree."""

import logging

from . import levels
from .console_sink import ConsoleSink


class PlatformSink(ConsoleSink):
    """Sink that hands formatted records to the host's ``logging`` setup.

    The stdlib logger used is named after the sink's tag: the full logger
    name, or its short name when ``copilot_logfacade.sink.showShortTag`` is
    true. Handlers, filters and output format are whatever the host
    application configured. Fatal records are emitted at CRITICAL.

    Building the first PlatformSink registers the name ``TRACE`` for stdlib
    level 5 with ``logging.addLevelName``. This changes the process-wide
    level names seen by every handler.
    """

    def __init__(self, name: str):
        """Initialize platform sink.

        Args:
            name: Logger (category) name
        """
        levels.register_trace_level()
        super().__init__(name)
        self.tag = self.short_name if self.settings.show_short_tag else name
        self._stdlib_logger = logging.getLogger(self.tag)

    def write(self, level: int, text: str) -> None:
        """Emit the formatted line through the stdlib logger."""
        self._stdlib_logger.log(levels.to_stdlib_level(level), text)
