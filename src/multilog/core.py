"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from .config import LoggingSettings
from .dispatcher import Dispatcher, log
from .formatters import ConsoleFormatter
from .interceptors import install_stdlib_interceptor, remove_stdlib_interceptor
from .level import Level
from .sinks import BaseSink, ConsoleSink, FileSink, GCloudReporter, RemoteReportSink, Reporter

# =============================================================================
# Global State
# =============================================================================

_owned_sinks: list[BaseSink] = []


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger whose events go through the dispatcher."""
    if name:
        return structlog.get_logger(_name=name)
    return structlog.get_logger()


# =============================================================================
# Structlog Processors
# =============================================================================


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Expose the bound logger name as a ``logger`` param."""
    name = event_dict.pop("_name", None)
    if name:
        event_dict["logger"] = name
    return event_dict


def make_dispatch_renderer(dispatcher: Dispatcher) -> Processor:
    """Terminal processor handing each event to ``dispatcher``. Returns empty to suppress default output."""

    def dispatch_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        if method_name == "exception":
            level = Level.ERROR
        else:
            try:
                level = Level.parse(method_name)
            except ValueError:
                level = Level.INFO

        message = event_dict.pop("event", "")
        function_name = event_dict.pop("func_name", None)
        line_num = event_dict.pop("lineno", None)
        file_name = event_dict.pop("pathname", None)

        dispatcher.log(
            level,
            message if isinstance(message, str) else str(message),
            event_dict or None,
            function_name=function_name,
            line_num=line_num,
            file_name=file_name,
        )
        return ""

    return dispatch_renderer


# =============================================================================
# Configuration Logic
# =============================================================================


def _close_owned_sinks() -> None:
    for sink in _owned_sinks:
        try:
            sink.close()
        except Exception:
            logging.getLogger(__name__).debug("closing %r failed", sink, exc_info=True)
    _owned_sinks.clear()


def _initialize_sinks(settings: LoggingSettings, reporter: Reporter | None) -> list[BaseSink]:
    """Create sinks in the order they are named."""
    sinks: list[BaseSink] = []
    for name in settings.sink_names:
        if name == "console":
            sinks.append(ConsoleSink(use_color=settings.console_color))
        elif name == "file":
            sinks.append(FileSink(settings.file_name, settings.log_dir))
        elif name == "remote":
            if reporter is None:
                reporter = GCloudReporter(project_id=settings.gcloud_project, log_name=settings.gcloud_log_name)
            sinks.append(RemoteReportSink(reporter))
    return sinks


def _configure_structlog(dispatcher: Dispatcher) -> None:
    """Configure structlog processors and factory."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_logger_name,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.PATHNAME,
            },
            additional_ignores=["multilog"],
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # Custom logger factory that suppresses empty output
    class NopFile:
        def write(self, s: str) -> None:
            pass

        def flush(self) -> None:
            pass

    _NOP_FILE = NopFile()

    class SilentPrintLoggerFactory:
        """Logger factory that returns a logger writing to nowhere."""

        def __call__(self, *args: Any) -> structlog.PrintLogger:
            return structlog.PrintLogger(file=_NOP_FILE)

    # Level filtering stays with the dispatcher so runtime changes apply.
    structlog.configure(
        processors=shared_processors + [make_dispatch_renderer(dispatcher)],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    dispatcher: Dispatcher | None = None,
    reporter: Reporter | None = None,
) -> Dispatcher:
    """
    Configure the logging system.

    Args:
        settings: Logging settings (default: read from the environment)
        dispatcher: Dispatcher to configure (default: the shared ``log``)
        reporter: Crash reporter for the remote sink (default: Google Cloud Logging)

    Returns:
        The configured dispatcher.
    """
    settings = settings or LoggingSettings()
    dispatcher = dispatcher or log

    # 1. Initialize Sinks
    _close_owned_sinks()
    ConsoleFormatter.configure(timestamp_format=settings.console_timestamp_format)
    sinks = _initialize_sinks(settings, reporter)
    _owned_sinks.extend(sinks)

    # 2. Configure Dispatcher
    dispatcher.register_sinks(sinks)
    dispatcher.set_minimum_level(settings.minimum_level)
    dispatcher.set_enabled(settings.enabled)

    # 3. Configure Structlog
    _configure_structlog(dispatcher)

    # 4. Intercept Stdlib Logging (Root)
    if settings.intercept_stdlib:
        install_stdlib_interceptor(dispatcher)
    else:
        remove_stdlib_interceptor()

    return dispatcher


def shutdown_logging(dispatcher: Dispatcher | None = None) -> None:
    """Close the sinks and detach the bridges. Call on process exit."""
    dispatcher = dispatcher or log
    remove_stdlib_interceptor()
    registered = dispatcher.sinks
    dispatcher.shutdown()
    _owned_sinks[:] = [sink for sink in _owned_sinks if sink not in registered]
    _close_owned_sinks()
    structlog.reset_defaults()


__all__ = [
    "add_logger_name",
    "configure_logging",
    "get_logger",
    "make_dispatch_renderer",
    "shutdown_logging",
]
