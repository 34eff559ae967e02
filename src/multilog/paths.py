"""
Per-user document directory resolution for file sinks.
"""

from __future__ import annotations

import os
from pathlib import Path


def default_log_directory() -> Path:
    """
    Return the user's document directory.

    Honors ``XDG_DOCUMENTS_DIR`` when set, otherwise ``~/Documents``.
    """
    xdg = os.environ.get("XDG_DOCUMENTS_DIR")
    if xdg:
        return Path(os.path.expandvars(xdg)).expanduser()
    return Path.home() / "Documents"


def resolve_log_path(file_name: str, directory: str | Path | None = None) -> Path:
    """Join ``file_name`` onto ``directory`` or the default document directory."""
    base = Path(directory).expanduser() if directory is not None else default_log_directory()
    return base / file_name
