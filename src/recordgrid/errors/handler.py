from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from recordgrid.events.bus import EventBus
from recordgrid.events.grid_events import ErrorOccurredEvent


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorHandler:
    """Log an error, publish it on the bus and pass its text to a notifier.

    The notifier is whatever the host uses to show toasts; it receives the
    error text exactly as raised.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._notifier: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_notifier(self, callback: Callable[[str, ErrorSeverity], None]) -> None:
        self._notifier = callback

    def handle(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[dict] = None,
    ) -> None:
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error)

        self._events.publish(ErrorOccurredEvent(
            error=error,
            severity=severity.value,
            context=dict(context or {}),
        ))

        if self._notifier and severity is not ErrorSeverity.INFO:
            try:
                self._notifier(str(error), severity)
            except Exception as exc:
                self._logger.error("Error notifier %r failed: %s", self._notifier, exc)
