"""Structured JSON logging with severity levels."""

from __future__ import annotations

import contextlib
import copy
import enum
import inspect
import json
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, TextIO


class Level(enum.IntEnum):
    """Logging severity, from least to most severe."""

    DEBUG = -1
    INFO = 0
    WARNING = 1
    ERROR = 2
    CRITICAL = 3
    ALERT = 4
    EMERGENCY = 5

    def __str__(self) -> str:
        return self.name.lower()


_LEVELS_BY_NAME = {str(member): member for member in Level}


def parse_level(level: str) -> Level:
    """Parse a lower-case level name."""
    try:
        return _LEVELS_BY_NAME[level]
    except KeyError:
        raise ValueError(f"unknown level: {level}") from None


def _now() -> str:
    stamp = datetime.now().astimezone().isoformat(timespec="seconds")
    if stamp.endswith("+00:00"):
        stamp = stamp[: -len("+00:00")] + "Z"
    return stamp


def _caller(frame) -> str:
    if frame is None:
        return "undefined"
    short = "/".join(Path(frame.f_code.co_filename).parts[-2:])
    return f"{short}:{frame.f_lineno}"


class Logger:
    """Writes one JSON object per log entry to a stream."""

    def __init__(
        self,
        service_name: str = "backend-service",
        level: Level = Level.DEBUG,
        show_caller: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._level = Level(level)
        self._show_caller = show_caller
        self._lock = threading.Lock()
        self._fields: list[tuple[str, Any]] = (
            [("service_name", service_name)] if service_name else []
        )

    @property
    def level(self) -> Level:
        return self._level

    def with_fields(self, fields: Mapping[str, Any]) -> Logger:
        """Return a logger that adds ``fields`` (sorted by key) to every entry."""
        clone = copy.copy(self)
        clone._fields = self._fields + [(key, fields[key]) for key in sorted(fields)]
        return clone

    def with_trace_id(self) -> Logger:
        """Return a logger that adds the current trace id to every entry."""
        from memecoin.trace import current_trace_id

        return self.with_fields({"trace_id": current_trace_id()})

    def sync(self) -> None:
        """Flush the underlying stream."""
        with contextlib.suppress(OSError, ValueError, AttributeError):
            self._stream.flush()

    def _log(self, level: Level, msg: str, args: tuple) -> str:
        message = msg % args if args else msg
        if level < self._level:
            return message
        entry: list[tuple[str, Any]] = [("severity", level.name), ("time", _now())]
        if self._show_caller:
            frame = inspect.currentframe()
            target = frame.f_back.f_back if frame and frame.f_back else None
            entry.append(("caller", _caller(target)))
        entry.append(("message", message))
        body = ",".join(
            f"{json.dumps(key)}:{json.dumps(value, default=str, ensure_ascii=False)}"
            for key, value in entry + self._fields
        )
        with self._lock:
            self._stream.write("{" + body + "}\n")
        return message

    def debug(self, msg: str, *args: Any) -> None:
        self._log(Level.DEBUG, msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._log(Level.INFO, msg, args)

    def warning(self, msg: str, *args: Any) -> None:
        self._log(Level.WARNING, msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._log(Level.ERROR, msg, args)

    def critical(self, msg: str, *args: Any) -> None:
        """Log a particularly important error."""
        self._log(Level.CRITICAL, msg, args)

    def alert(self, msg: str, *args: Any) -> None:
        """Log the message, then raise RuntimeError with it."""
        message = self._log(Level.ALERT, msg, args)
        raise RuntimeError(message)

    def emergency(self, msg: str, *args: Any) -> None:
        """Log the message, then exit with status 1."""
        self._log(Level.EMERGENCY, msg, args)
        self.sync()
        raise SystemExit(1)