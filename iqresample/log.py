"""Levelled logging to the console and to any number of extra sinks."""

from __future__ import annotations

import os
import sys
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable, ContextManager, Optional, TextIO

MAX_CALLBACKS = 32


class Level(IntEnum):
    """Severity of a log message, lowest first."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5


def level_string(level: int) -> str:
    """Return the upper-case name of a level; unknown levels raise ValueError."""
    return Level(level).name


@dataclass
class LogEvent:
    """One message on its way to the sinks."""

    level: Level
    file: str
    line: int
    message: str
    time: datetime = field(default_factory=datetime.now)


def _basename(path: str) -> str:
    cut = path.rfind("/")
    if os.name == "nt":
        cut = max(cut, path.rfind("\\"))
    return path[cut + 1:]


def _format(event: LogEvent, time_format: str) -> str:
    stamp = event.time.strftime(time_format)
    name = level_string(event.level)
    return f"{stamp} {name:<5} {_basename(event.file)}:{event.line}: {event.message}"


def format_console_line(event: LogEvent) -> str:
    """Format an event for the console: time of day, level, file and line."""
    return _format(event, "%H:%M:%S")


def format_file_line(event: LogEvent) -> str:
    """Format an event for a log file: full date and time, level, file and line."""
    return _format(event, "%Y-%m-%d %H:%M:%S")


LogCallback = Callable[[LogEvent], None]


class Logger:
    """Writes messages at or above a level to stderr and to registered callbacks."""

    def __init__(self, stream: Optional[TextIO] = None, level: int = Level.TRACE) -> None:
        self._stream = stream
        self._level = Level(level)
        self._quiet = False
        self._lock: Optional[ContextManager] = None
        self._callbacks: list[tuple[LogCallback, Level]] = []

    def set_level(self, level: int) -> None:
        """Set the lowest level written to the console."""
        self._level = Level(level)

    def set_quiet(self, enable: bool) -> None:
        """Silence or restore console output; callbacks still run."""
        self._quiet = bool(enable)

    def set_lock(self, lock: Optional[ContextManager]) -> None:
        """Hold this lock (any context manager) while a message is written."""
        self._lock = lock

    def add_callback(self, fn: LogCallback, level: int) -> None:
        """Register a sink receiving events at or above ``level``."""
        if len(self._callbacks) >= MAX_CALLBACKS:
            raise RuntimeError(f"at most {MAX_CALLBACKS} log callbacks can be registered")
        self._callbacks.append((fn, Level(level)))

    def add_stream(self, stream: TextIO, level: int) -> None:
        """Register a text stream that receives file-formatted lines."""

        def write(event: LogEvent) -> None:
            stream.write(format_file_line(event) + "\n")
            stream.flush()

        self.add_callback(write, level)

    def log(self, level: int, file: str, line: int, message: str) -> None:
        """Emit one message attributed to ``file`` at ``line``."""
        event = LogEvent(Level(level), file, line, message)
        with self._lock if self._lock is not None else nullcontext():
            if not self._quiet and event.level >= self._level:
                stream = self._stream if self._stream is not None else sys.stderr
                stream.write(format_console_line(event) + "\n")
                stream.flush()
            for fn, min_level in self._callbacks:
                if event.level >= min_level:
                    fn(event)

    def _emit(self, level: Level, message: str) -> None:
        caller = sys._getframe(2)
        self.log(level, caller.f_code.co_filename, caller.f_lineno, message)

    def debug(self, message: str) -> None:
        self._emit(Level.DEBUG, message)

    def info(self, message: str) -> None:
        self._emit(Level.INFO, message)

    def warn(self, message: str) -> None:
        self._emit(Level.WARN, message)

    def error(self, message: str) -> None:
        self._emit(Level.ERROR, message)

    def fatal(self, message: str) -> None:
        self._emit(Level.FATAL, message)