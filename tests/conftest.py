import os
import typing as t

import pytest
import structlog

from multilog import log
from multilog.event import LogEvent
from multilog.formatters import ConsoleFormatter
from multilog.interceptors import remove_stdlib_interceptor
from multilog.sinks import BaseSink


class RecordingSink(BaseSink):
    """Keeps every delivered event; optionally notes its name in a shared journal."""

    def __init__(self, name: str = "recording", journal: list[str] | None = None):
        self.name = name
        self.journal = journal
        self.events: list[LogEvent] = []
        self.closed = False

    def deliver(self, event: LogEvent) -> None:
        self.events.append(event)
        if self.journal is not None:
            self.journal.append(self.name)

    def close(self) -> None:
        self.closed = True

    @property
    def messages(self) -> list[str]:
        return [event.message for event in self.events]


class FailingSink(BaseSink):
    """Raises on every delivery."""

    def __init__(self, journal: list[str] | None = None):
        self.journal = journal
        self.attempts = 0

    def deliver(self, event: LogEvent) -> None:
        self.attempts += 1
        if self.journal is not None:
            self.journal.append("failing")
        raise OSError("disk on fire")


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sink_factory() -> t.Callable[..., RecordingSink]:
    return RecordingSink


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture(scope="function", autouse=True)
def restore_global_logging():
    """
    Restores the shared dispatcher, structlog and the root logger after each test.
    Tests may configure the process-wide state freely.
    """
    level, enabled, sinks = log.minimum_level, log.is_enabled, log.sinks
    timestamp_format = ConsoleFormatter.TIMESTAMP_FORMAT

    yield

    log.register_sinks(sinks)
    log.set_minimum_level(level)
    log.set_enabled(enabled)
    ConsoleFormatter.TIMESTAMP_FORMAT = timestamp_format
    remove_stdlib_interceptor()
    structlog.reset_defaults()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Removes MULTILOG_* variables and isolates from any .env in the working directory."""
    for name in list(os.environ):
        if name.startswith("MULTILOG_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
