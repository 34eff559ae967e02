"""
Interceptors for capturing standard library logs.
"""

from __future__ import annotations

import logging

from .dispatcher import Dispatcher, log
from .level import Level

_OWN_LOGGER = "multilog"


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging records to the dispatcher.
    Third-party libraries using ``logging.getLogger`` reach the same sinks.
    """

    def __init__(self, dispatcher: Dispatcher | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._dispatcher = dispatcher

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Our own diagnostics would loop back into the sinks.
            if record.name == _OWN_LOGGER or record.name.startswith(_OWN_LOGGER + "."):
                return

            dispatcher = self._dispatcher or log
            error = record.exc_info[1] if record.exc_info else None
            params = {"logger": record.name} if record.name != "root" else None

            dispatcher.log(
                Level.from_stdlib(record.levelno),
                record.getMessage(),
                params,
                function_name=record.funcName or "",
                line_num=record.lineno,
                file_name=record.pathname,
                error=error,
            )
        except Exception:
            self.handleError(record)


def install_stdlib_interceptor(dispatcher: Dispatcher | None = None) -> RedirectStdLibHandler:
    """Attach a redirect handler to the root logger, replacing one installed earlier.

    The root logger is opened to DEBUG; the dispatcher's minimum level does the
    gating, so ``set_minimum_level`` also applies to stdlib records.
    """
    remove_stdlib_interceptor()
    handler = RedirectStdLibHandler(dispatcher)
    handler._multilog_managed = True  # type: ignore[attr-defined]

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)
    return handler


def remove_stdlib_interceptor() -> None:
    """Detach handlers installed by ``install_stdlib_interceptor``; others are kept."""
    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if not getattr(h, "_multilog_managed", False)]
