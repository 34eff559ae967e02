"""
Text layouts for console, file and remote sinks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .event import LogEvent
from .level import Level

COLORS = {
    "reset": "\033[0m",
    "debug": "\033[36m",
    "info": "\033[32m",
    "warning": "\033[33m",
    "error": "\033[31m",
}

SYMBOLS = {
    Level.DEBUG: "💙",
    Level.INFO: "💜",
    Level.WARNING: "💛",
    Level.ERROR: "❤️",
}

SESSION_SEPARATOR = "\n\n---------- New session ----------\n"


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def render_value(value: Any) -> str:
    """Best-effort string conversion for param values."""
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def format_timestamp(moment: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """Render ``moment`` with millisecond precision appended."""
    return f"{moment.strftime(fmt)}.{moment.microsecond // 1000:03d}"


def call_site(event: LogEvent) -> str:
    return f"{event.file_name}->{event.function_name}:{event.line_num}"


def _extra_lines(event: LogEvent, prefix: str) -> str:
    lines = [f"\n{prefix}{key}: {render_value(value)}" for key, value in event.param_items()]
    if event.error is not None:
        lines.append(f"\n{prefix}error: {event.error!r}")
    return "".join(lines)


class ConsoleFormatter:
    """Multi-line console layout framed by a per-level symbol."""

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def configure(cls, *, timestamp_format: str | None = None) -> None:
        """Override rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format

    @classmethod
    def format(cls, event: LogEvent, *, use_color: bool = False) -> str:
        symbol = SYMBOLS[event.level]
        level_text = event.level.description()
        if use_color:
            level_text = colorize(level_text, level_text.lower())

        return "".join(
            [
                f"{symbol} ",
                f"{format_timestamp(event.timestamp, cls.TIMESTAMP_FORMAT)} {level_text} ",
                f"{call_site(event)} ",
                symbol,
                "\n\t",
                event.message,
                _extra_lines(event, "    "),
                "\n",
            ]
        )


def format_file_entry(event: LogEvent) -> str:
    """Single entry as appended to a log file."""
    return "".join(
        [
            f"{format_timestamp(event.timestamp)} {event.level.description()} ",
            f"{event.file_name}->{event.function_name} {event.line_num}: ",
            event.message,
            _extra_lines(event, ""),
            "\n",
        ]
    )


def format_remote_text(event: LogEvent) -> str:
    """Free-text layout forwarded to a crash reporter's log stream."""
    return "".join(
        [
            f"{format_timestamp(event.timestamp)} {event.level.description()} ",
            f"{call_site(event)} ",
            "\n\t",
            event.message,
            _extra_lines(event, "    "),
            "\n",
        ]
    )


def format_error_domain(event: LogEvent) -> str:
    """Identity string of a structured error record."""
    return f"[{event.level.description()}] {call_site(event)} {event.message}"
