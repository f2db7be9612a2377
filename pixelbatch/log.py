"""Informational, warning and error messages, routed to a handler or stdout."""

from __future__ import annotations

import dataclasses
import enum
from typing import Callable, Optional


class LogCategory(enum.Enum):
    """Severity of a logged message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


LogHandler = Callable[[str, LogCategory], None]

_PREFIXES = {
    LogCategory.INFO: "",
    LogCategory.WARNING: "WARN: ",
    LogCategory.ERROR: "ERROR: ",
}


@dataclasses.dataclass
class _LogState:
    handler: Optional[LogHandler] = None


_state = _LogState()


def set_handler(handler: Optional[LogHandler]) -> Optional[LogHandler]:
    """Install a handler for all messages; ``None`` restores printing.

    Returns the handler that was installed before.
    """
    previous = _state.handler
    _state.handler = handler
    return previous


def _emit(message: str, category: LogCategory) -> None:
    handler = _state.handler
    if handler is not None:
        handler(message, category)
    else:
        print(f"{_PREFIXES[category]}{message}")


def info(message: str) -> None:
    """Log an informational message."""
    _emit(message, LogCategory.INFO)


def warn(message: str) -> None:
    """Log a warning."""
    _emit(message, LogCategory.WARNING)


def error(message: str) -> None:
    """Log an error."""
    _emit(message, LogCategory.ERROR)