# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Azure Monitor sink with Application Insights integration.

This module imports the Azure Monitor OpenTelemetry exporter at import time.
Without the ``azure`` extra installed, discovery treats the sink as a
backend whose dependencies are missing rather than as a broken one.
"""

import logging
import os
import threading

from azure.monitor.opentelemetry.exporter import AzureMonitorLogExporter
from opentelemetry._logs import get_logger_provider, set_logger_provider
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor

from .platform_sink import PlatformSink

logger = logging.getLogger(__name__)

_provider_lock = threading.Lock()
_logger_provider: LoggerProvider | None = None


def _connection_string() -> str | None:
    connection_string = os.getenv("AZURE_MONITOR_CONNECTION_STRING")
    if connection_string:
        return connection_string
    instrumentation_key = os.getenv("AZURE_MONITOR_INSTRUMENTATION_KEY")
    if instrumentation_key:
        # Legacy format - construct connection string from instrumentation key
        return f"InstrumentationKey={instrumentation_key}"
    return None


def _get_logger_provider(conn_str: str) -> LoggerProvider:
    """Return the process-wide provider exporting to Azure Monitor."""
    global _logger_provider
    with _provider_lock:
        if _logger_provider is not None:
            return _logger_provider

        provider = get_logger_provider()
        # ProxyLoggerProvider doesn't have add_log_record_processor method
        if not hasattr(provider, "add_log_record_processor"):
            provider = LoggerProvider()
            set_logger_provider(provider)

        exporter = AzureMonitorLogExporter(connection_string=conn_str)
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))  # type: ignore[attr-defined]
        _logger_provider = provider  # type: ignore[assignment]
        return provider  # type: ignore[return-value]


class AzureMonitorSink(PlatformSink):
    """Sink that sends records to Azure Monitor / Application Insights.

    Records flow through the tag's stdlib logger like ``PlatformSink``; when a
    connection string is configured an OpenTelemetry ``LoggingHandler`` is
    attached to that logger so records are also exported to Azure Monitor.

    Environment Variables:
    - AZURE_MONITOR_CONNECTION_STRING: Connection string for Azure Monitor
    - AZURE_MONITOR_INSTRUMENTATION_KEY: Legacy instrumentation key (deprecated, use connection string)

    Without either variable the sink runs in fallback mode and behaves
    exactly like ``PlatformSink``.
    """

    def __init__(self, name: str):
        """Initialize Azure Monitor sink.

        Args:
            name: Logger (category) name
        """
        super().__init__(name)
        self._logger_provider: LoggerProvider | None = None

        conn_str = _connection_string()
        if conn_str is None:
            self._fallback_mode = True
            return

        self._logger_provider = _get_logger_provider(conn_str)
        self._fallback_mode = False

        # Check if handler already exists to avoid duplicates
        has_azure_handler = any(
            isinstance(h, LoggingHandler) for h in self._stdlib_logger.handlers
        )
        if not has_azure_handler:
            self._stdlib_logger.addHandler(LoggingHandler(logger_provider=self._logger_provider))

    def is_fallback_mode(self) -> bool:
        """Check if the sink is in fallback mode (no Azure Monitor export).

        Returns:
            True if no connection string was configured
        """
        return self._fallback_mode

    def shutdown(self) -> None:
        """Flush pending records and shut the exporter down.

        Call this during application shutdown to prevent data loss.
        """
        if self._logger_provider is None:
            return
        try:
            self._logger_provider.shutdown()
        except Exception as exc:
            # Shutdown failures are reported but never fatal
            logger.error("AzureMonitorSink shutdown() failed: %r", exc, exc_info=True)
