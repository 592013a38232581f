"""
Activity logging for native operations.

Each successful side effect is appended to a JSON Lines file as one record:

    {"timestamp": 1700000000,
     "env": {"pid": ..., "exe": ..., "args": [...], "user": ...},
     "activity": {...}}

The logger is constructed by the top-level execution context, opened
before the first activity runs, and closed (flushing the file) on exit.
"""

from __future__ import annotations

import getpass
import json
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO


class LoggerError(Exception):
    """Raised when the activity log is used outside its open/close window."""
    pass


@dataclass
class ProcessEnvironment:
    """
    Identity of the process that performed the activities.

    Captured once per logger so that every record carries the same block.
    """
    pid: int
    exe: str
    args: List[str]
    user: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pid": self.pid,
            "exe": self.exe,
            "args": self.args,
            "user": self.user,
        }


def capture_environment() -> ProcessEnvironment:
    """Describe the current process."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = ""
    return ProcessEnvironment(
        pid=os.getpid(),
        exe=sys.executable,
        args=list(sys.argv),
        user=user,
    )


class NullActivityLogger:
    """Discards every record; used when no log file is configured."""

    def log(self, activity) -> None:
        pass


class ActivityLogger:
    """
    Append-only JSON Lines activity log.

    Usage:
        with ActivityLogger("activity.log") as logger:
            logger.log(activity)

    Or explicitly:
        logger = ActivityLogger(path)
        logger.open()
        try:
            ...
        finally:
            logger.close()
    """

    def __init__(self, path: Path | str, env: Optional[ProcessEnvironment] = None):
        self.path = Path(path)
        self.env = env or capture_environment()
        self._fp: Optional[TextIO] = None

    @property
    def is_open(self) -> bool:
        return self._fp is not None

    def open(self) -> "ActivityLogger":
        """Open the log file for appending, creating it if needed."""
        if self._fp is None:
            self._fp = self.path.open("a", encoding="utf-8")
        return self

    def close(self) -> None:
        """Flush and close the log file."""
        if self._fp is not None:
            try:
                self._fp.flush()
            finally:
                self._fp.close()
                self._fp = None

    def __enter__(self) -> "ActivityLogger":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def make_record(self, activity) -> Dict[str, Any]:
        """Wrap an activity in a timestamped record."""
        return {
            "timestamp": int(time.time()),
            "env": self.env.to_dict(),
            "activity": activity.to_dict(),
        }

    def log(self, activity) -> None:
        """
        Append one activity record.

        Raises:
            LoggerError: If the logger has not been opened
        """
        if self._fp is None:
            raise LoggerError(f"activity log {self.path} is not open")
        self._fp.write(json.dumps(self.make_record(activity)))
        self._fp.write("\n")
        self._fp.flush()
