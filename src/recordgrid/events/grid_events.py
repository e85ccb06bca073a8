from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from recordgrid.domain.models import MutationPayload, RecordSet


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""


@dataclass(frozen=True)
class RecordSetLoadedEvent(DomainEvent):
    record_count: int = 0
    filtered_count: int = 0


@dataclass(frozen=True)
class RecordSetRefreshedEvent(DomainEvent):
    """Published by a data source that has fresh records for the grid."""
    record_set: Optional[RecordSet] = None


@dataclass(frozen=True)
class MutationSubmittedEvent(DomainEvent):
    payload: Optional[MutationPayload] = None


@dataclass(frozen=True)
class MutationCompletedEvent(DomainEvent):
    payload: Optional[MutationPayload] = None
    succeeded: bool = True
    message: Optional[str] = None


@dataclass(frozen=True)
class ErrorOccurredEvent(DomainEvent):
    error: Optional[Exception] = None
    severity: str = "error"
    context: Dict[str, Any] = field(default_factory=dict)
