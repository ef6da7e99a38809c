"""Verbosity-gated console logger.

A process-wide verbosity decides which calls print. ``error`` goes to
stderr, everything else to stdout unless set_log_stream() picks one stream
for all levels. Each printed line is also published on the log bus so
sinks (diagnostics JSONL, tests) can observe it.

    log = get_logger(__name__)
    log.debug("Attempted to delete a non-existing file")
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Any, TextIO

from filemason.core.config import LoggingPolicy
from filemason.core.log_bus import LogRecord, get_log_bus


class VerbosityLevel(IntEnum):
    QUIET = 0  # warnings and errors only
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


_state: dict[str, Any] = {"verbosity": VerbosityLevel.NORMAL, "colors": True, "stream": None}

_ANSI_RESET = "\033[0m"
_ANSI_BY_LEVEL = {
    "DEBUG": "\033[36m",
    "VERBOSE": "\033[34m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}


def set_verbosity(level: int | VerbosityLevel) -> None:
    """Accepts 0-3 or a VerbosityLevel."""
    _state["verbosity"] = VerbosityLevel(level)


def get_verbosity() -> VerbosityLevel:
    return VerbosityLevel(_state["verbosity"])


def set_colors(enabled: bool) -> None:
    """Colors are only emitted when the target stream is a TTY."""
    _state["colors"] = bool(enabled)


def set_log_stream(stream: TextIO | None) -> None:
    """Send every level to one stream; None restores stdout with errors on stderr."""
    _state["stream"] = stream


def apply_logging_policy(policy: LoggingPolicy) -> None:
    set_verbosity(VerbosityLevel[policy.level_name.upper()])
    set_colors(policy.color)


class FileMasonLogger:
    """Named logger; instances are shared through get_logger."""

    def __init__(self, name: str) -> None:
        self.name = name

    def _emit(self, threshold: VerbosityLevel, tag: str, message: str) -> None:
        if threshold > get_verbosity():
            return

        plain = f"[{tag.lower()}] {message}"
        get_log_bus().publish(LogRecord(level_name=tag, plain=plain, logger_name=self.name))

        stream = _state["stream"] or (sys.stderr if tag == "ERROR" else sys.stdout)
        if _state["colors"] and stream.isatty():
            line = f"{_ANSI_BY_LEVEL[tag]}[{tag.lower()}]{_ANSI_RESET} {message}"
        else:
            line = plain
        print(line, file=stream)

    def debug(self, message: str) -> None:
        self._emit(VerbosityLevel.DEBUG, "DEBUG", message)

    def verbose(self, message: str) -> None:
        self._emit(VerbosityLevel.VERBOSE, "VERBOSE", message)

    def info(self, message: str) -> None:
        self._emit(VerbosityLevel.NORMAL, "INFO", message)

    def warning(self, message: str) -> None:
        self._emit(VerbosityLevel.QUIET, "WARNING", message)

    def error(self, message: str) -> None:
        """Shown at every verbosity, on stderr."""
        self._emit(VerbosityLevel.QUIET, "ERROR", message)


_registry: dict[str, FileMasonLogger] = {}


def get_logger(name: str = "filemason") -> FileMasonLogger:
    """Return the shared logger for ``name``, creating it on first use."""
    return _registry.setdefault(name, FileMasonLogger(name))
