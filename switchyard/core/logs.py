"""Logging setup for the URL handler process."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def log_path() -> Path:
    xdg_state = Path(os.environ.get("XDG_STATE_HOME") or Path.home() / ".local/state")
    return xdg_state / "switchyard/switchyard.log"


def setup_logging(level: str = "WARNING") -> None:
    """Log to ``$XDG_STATE_HOME/switchyard/switchyard.log`` and stderr.

    The handler is launched by the desktop without a terminal, so the file is
    where routing decisions end up. If the state directory is not writable,
    only stderr is used.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    path = log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(path, encoding="utf-8"))
    except OSError as exc:
        print(f"Warning: cannot write log file {path}: {exc}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
