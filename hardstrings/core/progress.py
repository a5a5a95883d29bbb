"""
Progress reporting, user notifications and cooperative cancellation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum


class NotificationKind(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ProgressReporter(ABC):
    @abstractmethod
    def report(self, fraction: float, message: str) -> None: ...

    @abstractmethod
    def notify(self, kind: NotificationKind, message: str) -> None: ...


class LoggingReporter(ProgressReporter):
    """Sends progress to DEBUG and notifications to the matching log level."""

    _levels = {
        NotificationKind.INFO: logging.INFO,
        NotificationKind.WARNING: logging.WARNING,
        NotificationKind.ERROR: logging.ERROR,
    }

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)

    def report(self, fraction: float, message: str) -> None:
        self.logger.debug(f"[{fraction:.0%}] {message}")

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.logger.log(self._levels[kind], message)


class CancellationToken:
    """Polled by the workers; `cancel()` is safe to call from a signal handler."""

    def __init__(self):
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def reset(self) -> None:
        self._cancelled = False
