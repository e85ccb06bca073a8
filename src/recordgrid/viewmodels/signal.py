"""Observer primitives for the view layer.

``Signal`` delivers callbacks; ``ObservableProperty`` wraps a value and
announces every change, so hosts can bind widgets without polling.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

_logger = logging.getLogger(__name__)


class Signal:
    """Callback list with failure isolation.

    A handler that raises is logged and skipped; the remaining handlers still
    run.  While ``blocked()`` is active, ``emit`` does nothing.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()
        self._blocked = 0

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._blocked:
                return
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @contextmanager
    def blocked(self) -> Iterator[None]:
        with self._lock:
            self._blocked += 1
        try:
            yield
        finally:
            with self._lock:
                self._blocked -= 1

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Value holder emitting ``changed(new_value, old_value)`` on change."""

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.set(new_value)

    def set(self, new_value: Any) -> bool:
        """Store *new_value*; return ``True`` if it differed from the old one."""
        if self._value == new_value:
            return False
        old_value = self._value
        self._value = new_value
        self.changed.emit(new_value, old_value)
        return True
