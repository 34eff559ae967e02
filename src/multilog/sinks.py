"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import logging
import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

import orjson

from .event import LogEvent
from .formatters import (
    SESSION_SEPARATOR,
    ConsoleFormatter,
    format_error_domain,
    format_file_entry,
    format_remote_text,
)
from .level import Level
from .paths import resolve_log_path

if TYPE_CHECKING:
    from google.cloud.logging import Client as GCloudLoggingClient

logger = logging.getLogger(__name__)


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(
        v,
        default=default,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    ).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def deliver(self, event: LogEvent) -> None:
        """Render and deliver a log event."""
        ...

    def close(self) -> None:
        """Release resources held by the sink."""


_shared_locks: dict[object, threading.Lock] = {}
_shared_locks_guard = threading.Lock()


def _shared_lock(key: object) -> threading.Lock:
    with _shared_locks_guard:
        lock = _shared_locks.get(key)
        if lock is None:
            lock = _shared_locks[key] = threading.Lock()
        return lock


def _lock_for(path: Path) -> threading.Lock:
    """One lock per file so sinks sharing a path serialize together."""
    return _shared_lock(("path", path.absolute()))


def _lock_for_stream(stream: TextIO) -> threading.Lock:
    """One lock per stream object so sinks sharing stdout serialize together."""
    return _shared_lock(("stream", id(stream)))


class ConsoleSink(BaseSink):
    """Human-readable multi-line output on stdout.

    Args:
        stream: Output stream (default: ``sys.stdout`` at write time)
        use_color: Colour the level name; defaults to ``stream.isatty()``
    """

    def __init__(self, stream: TextIO | None = None, use_color: bool | None = None):
        self._stream = stream
        self._use_color = use_color

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def deliver(self, event: LogEvent) -> None:
        stream = self.stream
        try:
            use_color = self._use_color
            if use_color is None:
                use_color = bool(getattr(stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event, use_color=use_color)

            with _lock_for_stream(stream):
                stream.write(output + "\n")
                stream.flush()
        except Exception:
            logger.debug("console write failed, entry dropped", exc_info=True)


class FileSink(BaseSink):
    """Append-only text file, one session separator per instance.

    Args:
        file_name: Name of the log file
        directory: Parent directory (default: the user's document directory)
    """

    def __init__(self, file_name: str, directory: str | Path | None = None):
        self._path = resolve_log_path(file_name, directory)
        self._lock = _lock_for(self._path)
        self._write(SESSION_SEPARATOR)

    @property
    def path(self) -> Path:
        return self._path

    def deliver(self, event: LogEvent) -> None:
        self._write(format_file_entry(event))

    def clear(self) -> None:
        """Delete the log file. The next delivery recreates it."""
        with self._lock:
            try:
                self._path.unlink(missing_ok=True)
            except OSError:
                logger.debug("could not remove %s", self._path, exc_info=True)

    def _write(self, text: str) -> None:
        with self._lock:
            try:
                with open(self._path, "a", encoding="utf-8") as fh:
                    fh.write(text)
                return
            except OSError:
                if self._path.exists():
                    logger.debug("append to %s failed, entry dropped", self._path, exc_info=True)
                    return

            # Missing file or directory: start a fresh file.
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with open(self._path, "w", encoding="utf-8") as fh:
                    fh.write(text)
            except OSError:
                logger.debug("could not create %s, entry dropped", self._path, exc_info=True)


# =============================================================================
# Remote crash reporting
# =============================================================================


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error handed to a crash reporter."""

    domain: str
    code: int = -1
    user_info: dict[str, Any] = field(default_factory=dict)
    level: Level = Level.ERROR


@runtime_checkable
class Reporter(Protocol):
    """Boundary of a remote crash-reporting service."""

    def log(self, message: str) -> None: ...

    def record_error(self, record: ErrorRecord) -> None: ...


class RemoteReportSink(BaseSink):
    """Forward INFO as free text and WARNING/ERROR as error records. DEBUG is dropped."""

    ERROR_CODE = -1

    def __init__(self, reporter: Reporter):
        self._reporter = reporter

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    def deliver(self, event: LogEvent) -> None:
        if event.level == Level.DEBUG:
            return

        try:
            if event.level == Level.INFO:
                self._reporter.log(format_remote_text(event))
                return

            self._reporter.record_error(
                ErrorRecord(
                    domain=format_error_domain(event),
                    code=self.ERROR_CODE,
                    user_info=dict(event.params or {}),
                    level=event.level,
                )
            )
        except Exception:
            logger.debug("remote report failed, entry dropped", exc_info=True)

    def close(self) -> None:
        close = getattr(self._reporter, "close", None)
        if callable(close):
            close()


class GCloudReporter:
    """Google Cloud Logging as the crash-reporting backend."""

    def __init__(self, project_id: str | None = None, log_name: str = "multilog"):
        self._client: GCloudLoggingClient | None = None
        try:
            from google.cloud import logging as gcloud_logging

            self._client = gcloud_logging.Client(project=project_id)
            self._logger = self._client.logger(log_name)
            self._available = True
        except Exception:
            logger.debug("google cloud logging unavailable", exc_info=True)
            self._available = False
            self._logger = None

    @property
    def available(self) -> bool:
        return self._available

    def log(self, message: str) -> None:
        if not self._available or not self._logger:
            return
        self._logger.log_text(message, severity="INFO")

    def record_error(self, record: ErrorRecord) -> None:
        if not self._available or not self._logger:
            return
        payload = {
            "message": record.domain,
            "code": record.code,
            "user_info": orjson.loads(orjson_dumps(record.user_info, default=str)),
        }
        self._logger.log_struct(payload, severity=record.level.description())

    def close(self) -> None:
        if self._available and self._client:
            self._client.close()
