"""
Leveled multi-sink logging for Python applications.

Provides one process-wide dispatcher with pluggable sinks:
- console: Human-readable multi-line output on stdout
- file: Append-only session log under the user's document directory
- remote: Crash-reporting service (Google Cloud Logging by default)

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog bridge, pydantic-settings configuration, orjson for remote payloads.
"""

from .config import LoggingSettings
from .core import configure_logging, get_logger, shutdown_logging
from .dispatcher import Dispatcher, log
from .event import LogEvent
from .level import Level
from .sinks import BaseSink, ConsoleSink, ErrorRecord, FileSink, GCloudReporter, RemoteReportSink, Reporter

debug = log.debug
info = log.info
warning = log.warning
error = log.error

__all__ = [
    "BaseSink",
    "ConsoleSink",
    "Dispatcher",
    "ErrorRecord",
    "FileSink",
    "GCloudReporter",
    "Level",
    "LogEvent",
    "LoggingSettings",
    "RemoteReportSink",
    "Reporter",
    "configure_logging",
    "debug",
    "error",
    "get_logger",
    "info",
    "log",
    "shutdown_logging",
    "warning",
]
