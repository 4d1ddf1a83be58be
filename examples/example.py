#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Example usage of the copilot_logfacade module.

This script shows the default sink discovery, pinning a sink through
factory attributes and per-category levels.
"""

import logging

from copilot_logfacade import (
    SINK_CLASS_KEY,
    ConfigResolver,
    LogSinkFactory,
    SinkSettings,
    configure_diagnostics,
    disable_diagnostics,
    get_logger,
)
from copilot_logfacade.config import set_sink_settings


def main():
    """Demonstrate logging functionality."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Copilot Logging Facade Examples")
    print("=" * 60)
    print()

    # Example 1: Default discovery (platform sink -> stdlib logging)
    print("Example 1: Default sink")
    print("-" * 60)
    logger = get_logger("com.acme.example.Service")
    print(f"Resolved sink: {type(logger.sink).__name__}")

    logger.info("Service started with %d workers", 4)
    logger.warn("Rate limit approaching (%d of %d)", 95, 100)
    logger.debug("This debug message won't appear (INFO is the default level)")
    print()

    # Example 2: Pinned silent sink for testing
    print("Example 2: Pinned SilentSink")
    print("-" * 60)
    factory = LogSinkFactory(environ={})
    factory.set_attribute(SINK_CLASS_KEY, "copilot_logfacade.silent_sink.SilentSink")
    test_logger = factory.get_logger("test-service")

    test_logger.info("Test message 1")
    test_logger.warn("Test warning")
    try:
        raise ConnectionError("Connection timeout")
    except ConnectionError:
        test_logger.exception("Failed to connect to %s", "localhost")

    sink = test_logger.sink
    print(f"Total logs captured: {len(sink.logs)}")
    print(f"Has 'Test message 1': {sink.has_log('Test message 1')}")
    print(f"Warn logs: {len(sink.get_logs(level='WARN'))}")
    for log in sink.logs:
        print(f"  [{log['level']}] {log['message']}")
    print()

    # Example 3: Category levels and line layout
    print("Example 3: Console sink with category levels")
    print("-" * 60)
    set_sink_settings(SinkSettings.from_resolver(ConfigResolver(
        environ={},
        properties={
            "copilot_logfacade.sink.log.com.acme.db": "debug",
            "copilot_logfacade.sink.showlevel": "true",
            "copilot_logfacade.sink.showdatetime": "true",
            "copilot_logfacade.sink.dateTimeFormat": "HH:mm:ss.SSS",
        },
    )))
    console = LogSinkFactory(environ={SINK_CLASS_KEY: "copilot_logfacade.console_sink.ConsoleSink"})

    console.get_logger("com.acme.db.Pool").debug("Debug enabled for the db category")
    console.get_logger("com.acme.web.Router").debug("Debug disabled elsewhere")
    console.get_logger("com.acme.web.Router").info("Routing table loaded")
    print()

    # Example 4: Discovery diagnostics
    print("Example 4: Discovery diagnostics on stdout")
    print("-" * 60)
    configure_diagnostics("STDOUT")
    LogSinkFactory(environ={}).get_logger("com.acme.example.Diagnosed")
    disable_diagnostics()
    print()

    print("=" * 60)
    print("Examples completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
