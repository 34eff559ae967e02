"""
Log event record shared by every sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from types import MappingProxyType
from typing import Any, Mapping

from .level import Level


def normalize_file_name(path: str | None) -> str:
    """Reduce a source path to its base name without directory or extension."""
    if not path:
        return ""
    # Windows separators survive PurePath on POSIX hosts.
    return PurePath(str(path).replace("\\", "/")).stem


@dataclass(frozen=True)
class LogEvent:
    """One accepted log call with its call-site context."""

    level: Level
    message: str
    params: Mapping[str, Any] | None = None
    function_name: str = ""
    line_num: int = 0
    file_name: str = ""
    error: BaseException | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        if self.line_num < 0:
            object.__setattr__(self, "line_num", 0)

    def param_items(self) -> list[tuple[str, Any]]:
        """Params in insertion order; empty when there are none."""
        if not self.params:
            return []
        return list(self.params.items())
