"""
Severity levels.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

_ALIASES = {
    "WARN": "WARNING",
    "CRITICAL": "ERROR",
    "FATAL": "ERROR",
}


class Level(IntEnum):
    """Ordered severity of a log call. Filtering compares ranks."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    def rank(self) -> int:
        return int(self.value)

    def description(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.description()

    def to_stdlib(self) -> int:
        """Return the matching numeric level of the stdlib ``logging`` module."""
        return _TO_STDLIB[self]

    @classmethod
    def parse(cls, value: Any) -> Level:
        """
        Coerce a level, an integer rank or a case-insensitive level name.

        Raises:
            ValueError: if the value names no level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            try:
                return cls[name]
            except KeyError:
                pass
        raise ValueError(f"Unknown log level: {value!r}. Available: {[lvl.name for lvl in cls]}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Map a stdlib numeric level onto the nearest level at or below it."""
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_TO_STDLIB = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
}
