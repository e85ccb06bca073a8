"""Event-subscription lifecycle shared by view models."""

from __future__ import annotations

from typing import Callable, Type

from recordgrid.events.bus import EventBus, Subscription


class BaseViewModel:
    """Tracks bus subscriptions so ``dispose()`` can cancel them all."""

    def __init__(self) -> None:
        self._subscriptions: list[tuple[EventBus, Subscription]] = []

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append((event_bus, sub))
        return sub

    def dispose(self) -> None:
        """Unsubscribe from every bus this view model listens to."""
        for bus, sub in self._subscriptions:
            bus.unsubscribe(sub)
        self._subscriptions.clear()
