"""
The ``Log`` facade: level gate, call-site capture and fan-out to sinks.

A process normally uses the shared instance ``multilog.log``::

    from multilog import log, ConsoleSink, FileSink

    log.register_sinks([ConsoleSink(), FileSink("logs")])
    log.info("user signed in", params={"user_id": 42})
    log.debug(lambda: expensive_dump())  # only evaluated when DEBUG passes

Call-site metadata (function, line, file) may be passed explicitly. Whatever
is omitted is taken from the first stack frame outside this package, and only
once the call has passed the gate.
"""

from __future__ import annotations

import logging
import sys
import threading
from types import FrameType
from typing import Any, Callable, Iterable, Mapping, Union

from .event import LogEvent, normalize_file_name
from .level import Level
from .sinks import BaseSink

logger = logging.getLogger(__name__)

Message = Union[str, Callable[[], Any]]

# Frames of these packages sit between the caller and the dispatcher.
_SKIPPED_PACKAGES = (__name__.rpartition(".")[0], "structlog", "logging")
_MAX_FRAME_DEPTH = 50


def _default_level() -> Level:
    return Level.DEBUG if __debug__ else Level.INFO


def _is_skipped(module: str) -> bool:
    return any(module == name or module.startswith(name + ".") for name in _SKIPPED_PACKAGES)


def _caller_frame() -> FrameType | None:
    frame: FrameType | None = sys._getframe(1)
    for _ in range(_MAX_FRAME_DEPTH):
        if frame is None:
            return None
        if not _is_skipped(frame.f_globals.get("__name__", "")):
            return frame
        frame = frame.f_back
    return None


class Dispatcher:
    """Process-wide router from leveled log calls to registered sinks."""

    def __init__(
        self,
        minimum_level: Level | str | int | None = None,
        *,
        enabled: bool = True,
        sinks: Iterable[BaseSink] = (),
    ):
        self._lock = threading.RLock()
        self._minimum_level = Level.parse(minimum_level) if minimum_level is not None else _default_level()
        self._enabled = enabled
        self._sinks: tuple[BaseSink, ...] = tuple(sinks)

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def minimum_level(self) -> Level:
        return self._minimum_level

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    def set_minimum_level(self, level: Level | str | int) -> None:
        parsed = Level.parse(level)
        with self._lock:
            self._minimum_level = parsed

    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = bool(enabled)

    def register_sinks(self, sinks: Iterable[BaseSink]) -> None:
        """Replace the registered sinks, keeping the given order."""
        registered = tuple(sinks)
        with self._lock:
            self._sinks = registered

    def shutdown(self) -> None:
        """Close every registered sink and clear the registration."""
        with self._lock:
            sinks, self._sinks = self._sinks, ()
        for sink in sinks:
            try:
                sink.close()
            except Exception:
                logger.debug("closing %r failed", sink, exc_info=True)

    def is_logging(self, level: Level) -> bool:
        """Whether a call at ``level`` would reach the sinks."""
        return self._enabled and level.rank() >= self._minimum_level.rank()

    # -------------------------------------------------------------------------
    # Log calls
    # -------------------------------------------------------------------------

    def debug(self, message: Message, params: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self.log(Level.DEBUG, message, params, **kwargs)

    def info(self, message: Message, params: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self.log(Level.INFO, message, params, **kwargs)

    def warning(self, message: Message, params: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self.log(Level.WARNING, message, params, **kwargs)

    def error(self, message: Message, params: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self.log(Level.ERROR, message, params, **kwargs)

    def log(
        self,
        level: Level,
        message: Message,
        params: Mapping[str, Any] | None = None,
        *,
        function_name: str | None = None,
        line_num: int | None = None,
        file_name: str | None = None,
        error: BaseException | None = None,
    ) -> None:
        """
        Deliver one event to every sink if ``level`` passes the gate.

        Args:
            level: Severity of the call
            message: Text, or a zero-argument callable producing it
            params: Extra key/value context rendered after the message
            function_name: Calling function (captured when omitted)
            line_num: Calling line (captured when omitted)
            file_name: Calling source path or name (captured when omitted)
            error: Exception attached for information
        """
        if not isinstance(level, Level):
            try:
                level = Level.parse(level)
            except ValueError:
                logger.debug("unknown level %r, call dropped", level)
                return
        with self._lock:
            if not self._enabled or level.rank() < self._minimum_level.rank():
                return
            sinks = self._sinks

        if function_name is None or line_num is None or file_name is None:
            frame = _caller_frame()
            if frame is not None:
                if function_name is None:
                    function_name = frame.f_code.co_name
                if line_num is None:
                    line_num = frame.f_lineno
                if file_name is None:
                    file_name = frame.f_code.co_filename
                del frame

        try:
            text = message() if callable(message) else message
            event = LogEvent(
                level=level,
                message=text if isinstance(text, str) else str(text),
                params=params,
                function_name=function_name or "",
                line_num=line_num or 0,
                file_name=normalize_file_name(file_name),
                error=error,
            )
        except Exception:
            logger.debug("could not build log event", exc_info=True)
            return

        for sink in sinks:
            try:
                sink.deliver(event)
            except Exception:
                logger.debug("sink %r failed to deliver", sink, exc_info=True)


# Shared instance, configured once at startup.
log = Dispatcher()
