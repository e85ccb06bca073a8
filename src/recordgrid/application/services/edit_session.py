"""Edit session state machine.

States are ``CLOSED``, ``SINGLE_EDIT``, ``BULK_EDIT`` and ``CREATE``.  Opening
any session replaces whatever session was open before, overlay included.
``commit`` turns the open session into a mutation payload and closes it;
``cancel`` closes it without producing anything.

Which fields an overlay accepts depends on the session kind:

* single and bulk edits accept only columns flagged ``editable``;
* create accepts any column of the record set.

Fields outside that set are dropped with a debug log line.  They come from
operator input, so a stray name is not treated as an error.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Sequence

from recordgrid.config import DEFAULT_ID_FIELD
from recordgrid.domain.models import (
    BulkEdit,
    Column,
    Create,
    CreatePayload,
    EditSession,
    MutationPayload,
    Record,
    SessionKind,
    SingleEdit,
    UpdatePayload,
    record_id,
)
from recordgrid.errors import PolicyViolationError, RecordNotFoundError, SessionStateError

from .selection_tracker import SelectionTracker


@dataclass(frozen=True)
class FormField:
    """One input of the edit/create form, with the overlay value merged in."""

    field_name: str
    label: str
    value: Any
    type: str
    editable: bool


class EditSessionManager:
    def __init__(
        self,
        selection: SelectionTracker,
        id_field: str = DEFAULT_ID_FIELD,
    ) -> None:
        self._selection = selection
        self._id_field = id_field
        self._session: EditSession = EditSession()
        self._logger = logging.getLogger(__name__)

    # -- properties --------------------------------------------------------

    @property
    def session(self) -> EditSession:
        return self._session

    @property
    def state(self) -> SessionKind:
        return self._session.kind

    @property
    def is_open(self) -> bool:
        return self._session.is_open

    @property
    def overlay(self) -> Dict[str, Any]:
        """A copy of the current overlay."""
        return dict(self._session.overlay)

    # -- opening -----------------------------------------------------------

    def open_single_edit(self, record: Record, columns: Sequence[Column]) -> SingleEdit:
        """Open an edit of *record*, seeding the overlay with its editable values."""
        target = record_id(record, self._id_field)
        if target is None:
            raise RecordNotFoundError(f"Record has no '{self._id_field}' value")
        base = deepcopy(dict(record))
        overlay = {
            col.field_name: base[col.field_name]
            for col in columns
            if col.editable and col.field_name in base
        }
        session = SingleEdit(
            target_id=target,
            base=base,
            overlay=overlay,
            columns=tuple(columns),
        )
        self._replace(session)
        return session

    def open_bulk_edit(
        self,
        columns: Sequence[Column],
        order: Optional[Sequence[Hashable]] = None,
    ) -> BulkEdit:
        """Open a bulk edit over the current selection.

        *order* gives the sequence the target ids should appear in; ids not
        listed keep an arbitrary but stable position after the listed ones.
        """
        if not self._selection.can_bulk_edit:
            raise PolicyViolationError(
                f"Bulk edit needs at least {self._selection.min_bulk_selection} "
                f"selected rows, {self._selection.count()} selected"
            )
        selected = self._selection.selected
        targets = [i for i in (order or ()) if i in selected]
        targets += sorted((i for i in selected if i not in targets), key=repr)
        session = BulkEdit(target_ids=tuple(targets), columns=tuple(columns))
        self._replace(session)
        return session

    def open_create(self, columns: Sequence[Column]) -> Create:
        session = Create(columns=tuple(columns))
        self._replace(session)
        return session

    # -- editing -----------------------------------------------------------

    def set_field(self, name: str, value: Any) -> bool:
        """Merge one field into the overlay; return ``False`` when it was dropped."""
        session = self._require_open()
        if name not in self._allowed_fields(session):
            self._logger.debug(
                "Dropped field %r: not accepted by %s session", name, session.kind.value
            )
            return False
        session.overlay[name] = value
        return True

    def set_fields(self, values: Dict[str, Any]) -> List[str]:
        """Merge several fields; return the names that were dropped."""
        return [name for name, value in values.items() if not self.set_field(name, value)]

    def form_fields(self) -> List[FormField]:
        """Inputs the edit form shows for the open session (empty when closed)."""
        session = self._session
        if not session.is_open:
            return []
        allowed = self._allowed_fields(session)
        base = session.base if isinstance(session, SingleEdit) else {}
        fields = []
        for col in session.columns:
            if col.field_name not in allowed:
                continue
            value = session.overlay.get(col.field_name, base.get(col.field_name))
            fields.append(
                FormField(
                    field_name=col.field_name,
                    label=col.display_label,
                    value=value,
                    type=col.type.value,
                    editable=col.editable,
                )
            )
        return fields

    # -- closing -----------------------------------------------------------

    def commit(self) -> MutationPayload:
        """Build the payload for the open session and close it.

        The session closes whether or not the payload is later accepted by the
        persistence layer.
        """
        session = self._require_open()
        payload: MutationPayload
        if isinstance(session, SingleEdit):
            payload = UpdatePayload(targets=(session.target_id,), fields=dict(session.overlay))
        elif isinstance(session, BulkEdit):
            payload = UpdatePayload(targets=session.target_ids, fields=dict(session.overlay))
        else:
            payload = CreatePayload(fields=dict(session.overlay))
        self._logger.info(
            "Committed %s session with %d field(s)", session.kind.value, len(session.overlay)
        )
        self._session = EditSession()
        return payload

    def cancel(self) -> bool:
        """Close the session without a payload; return ``False`` if none was open."""
        if not self._session.is_open:
            return False
        self._logger.info("Cancelled %s session", self._session.kind.value)
        self._session = EditSession()
        return True

    # -- internal ----------------------------------------------------------

    def _replace(self, session: EditSession) -> None:
        if self._session.is_open:
            self._logger.info(
                "Discarding open %s session with %d pending field(s)",
                self._session.kind.value,
                len(self._session.overlay),
            )
        self._session = session
        self._logger.info("Opened %s session", session.kind.value)

    def _require_open(self) -> EditSession:
        if not self._session.is_open:
            raise SessionStateError("No edit session is open")
        return self._session

    @staticmethod
    def _allowed_fields(session: EditSession) -> set:
        if session.kind is SessionKind.CREATE:
            return {col.field_name for col in session.columns}
        return {col.field_name for col in session.columns if col.editable}
