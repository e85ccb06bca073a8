from .bus import EventBus, Subscription
from .grid_events import (
    DomainEvent,
    ErrorOccurredEvent,
    MutationCompletedEvent,
    MutationSubmittedEvent,
    RecordSetLoadedEvent,
    RecordSetRefreshedEvent,
)

__all__ = [
    "DomainEvent",
    "ErrorOccurredEvent",
    "EventBus",
    "MutationCompletedEvent",
    "MutationSubmittedEvent",
    "RecordSetLoadedEvent",
    "RecordSetRefreshedEvent",
    "Subscription",
]
