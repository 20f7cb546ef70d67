"""Levelled, coloured logging to standard error.

Debug messages are shown only after ``init(True)``; warnings are shown only
when the ``OSX_SHOW_WARNINGS`` environment variable is set.
"""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, field

_RESET = "\033[0m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_DIMMED = "\033[2m"


@dataclass
class _LoggerState:
    debug: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)


_state = _LoggerState()


def _paint(text: str, code: str) -> str:
    if os.environ.get("NO_COLOR") is not None:
        return text
    return f"{code}{text}{_RESET}"


def _emit(tag: str, code: str, message: str) -> None:
    line = f"{_paint(tag, code)} {message}"
    with _state.lock:
        print(line, file=sys.stderr, flush=True)


def init(debug: bool) -> None:
    """Set whether debug messages are printed."""
    _state.debug = bool(debug)
    if debug:
        globals_free_debug = "Logger initialized in DEBUG mode"
        _debug_message(globals_free_debug)


def is_debug_enabled() -> bool:
    """Return True when debug logging has been switched on."""
    return _state.debug


def info(message: str) -> None:
    """Print an informational message."""
    _emit("[INFO]", _GREEN, str(message))


def warn(message: str) -> None:
    """Print a warning, but only when OSX_SHOW_WARNINGS is set."""
    if os.environ.get("OSX_SHOW_WARNINGS") is not None:
        _emit("[WARN]", _YELLOW, str(message))


def error(message: str) -> None:
    """Print an error message."""
    _emit("[ERROR]", _RED, str(message))


def _debug_message(message: str) -> None:
    if _state.debug:
        _emit("[DEBUG]", _DIMMED, str(message))


def debug(message: str) -> None:
    """Print a debug message when debug logging is enabled."""
    _debug_message(message)