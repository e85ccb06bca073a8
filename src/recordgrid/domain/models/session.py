"""Edit session variants.

At most one session is open at a time.  A session owns an *overlay*: the
field edits entered so far, kept apart from the base record until commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Optional, Tuple

from .core import Column


class SessionKind(str, Enum):
    CLOSED = "closed"
    SINGLE_EDIT = "single_edit"
    BULK_EDIT = "bulk_edit"
    CREATE = "create"


@dataclass
class EditSession:
    kind: SessionKind = SessionKind.CLOSED
    overlay: Dict[str, Any] = field(default_factory=dict)
    # Column schema captured when the session opened
    columns: Tuple[Column, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.kind is not SessionKind.CLOSED


@dataclass
class SingleEdit(EditSession):
    target_id: Optional[Hashable] = None
    # Copy of the record as it was when the session opened
    base: Dict[str, Any] = field(default_factory=dict)
    kind: SessionKind = SessionKind.SINGLE_EDIT


@dataclass
class BulkEdit(EditSession):
    # Selected ids in record-set order
    target_ids: Tuple[Hashable, ...] = ()
    kind: SessionKind = SessionKind.BULK_EDIT


@dataclass
class Create(EditSession):
    kind: SessionKind = SessionKind.CREATE
