"""Synchronous in-process event bus shared by the grid and its collaborators."""

from __future__ import annotations

import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type

from .grid_events import DomainEvent


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = DomainEvent
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class EventBus:
    """Deliver events to handlers registered for the event's type or a base type.

    Handlers run on the publishing thread, in subscription order.  A failing
    handler is logged and does not stop delivery to the rest.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[DomainEvent], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        with self._lock:
            subs = self._handlers.get(subscription.event_type, [])
            if subscription in subs:
                subs.remove(subscription)

    def publish(self, event: DomainEvent) -> int:
        """Dispatch *event* and return how many handlers received it."""
        with self._lock:
            subs = [
                sub
                for event_type in type(event).__mro__
                for sub in self._handlers.get(event_type, ())
            ]

        delivered = 0
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as exc:
                self._logger.error(
                    "Handler failed for %s: %s", type(event).__name__, exc
                )
            delivered += 1
        return delivered

    def subscriber_count(self, event_type: Type[DomainEvent]) -> int:
        with self._lock:
            return sum(1 for sub in self._handlers.get(event_type, ()) if sub.active)
