"""Timestamped, thread-safe append-only debug log file."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import IO, Optional, Union

DEFAULT_LOG_NAME = "mcraw_player_debug_log.txt"


def format_log_line(message: str, when: datetime) -> str:
    """Return a log line with a millisecond-precision local timestamp prefix."""
    millis = when.microsecond // 1000
    return f"[{when:%Y-%m-%d %H:%M:%S}.{millis:03d}] {message}"


class _FileLog:
    """Lazily opened log file shared by the whole process."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._lock = threading.Lock()
        self._path = Path(path)
        self._handle: Optional[IO[str]] = None
        self._open_failed = False

    def set_path(self, path: Union[str, Path]) -> None:
        with self._lock:
            self._close()
            self._path = Path(path)
            self._open_failed = False

    def write(self, message: str) -> None:
        with self._lock:
            handle = self._ensure_open()
            if handle is None:
                return
            try:
                handle.write(format_log_line(message, datetime.now()) + "\n")
                handle.flush()
            except OSError:
                pass

    def _ensure_open(self) -> Optional[IO[str]]:
        if self._handle is None and not self._open_failed:
            try:
                self._handle = open(self._path, "a", encoding="utf-8")
            except OSError:
                self._open_failed = True
        return self._handle

    def _close(self) -> None:
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError:
                pass
            self._handle = None


_log = _FileLog(DEFAULT_LOG_NAME)


def set_log_path(path: Union[str, Path]) -> None:
    """Direct subsequent log lines to ``path``, closing any file already open."""
    _log.set_path(path)


def log_to_file(message: str) -> None:
    """Append a timestamped line to the log file; failures to open are ignored."""
    _log.write(message)