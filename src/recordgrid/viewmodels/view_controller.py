"""ViewController: the grid's public surface.

Every view mutator recomputes filter -> sort -> paginate against the current
``ViewState`` and the most recent ``RecordSet`` before it returns, then
publishes one ``ViewSnapshot``.  Page navigation only re-slices the already
ordered records.  Consumers read the snapshot; they never see a half-updated
view.

Edits go through ``EditSessionManager``.  Committing hands a payload to the
persistence gateway and returns a ``Future``; the grid reloads only after the
gateway acknowledges success, and the future resolves after that reload.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from recordgrid.application.services import (
    EditSessionManager,
    FormField,
    Paginator,
    SelectionTracker,
    filter_records,
    sort_records,
)
from recordgrid.config import (
    PAGE_INFO_TEMPLATE,
    ROW_ACTION_DELETE,
    ROW_ACTION_EDIT,
    ROW_ACTION_VIEW,
)
from recordgrid.domain.models import (
    DeletePayload,
    GridOptions,
    MutationPayload,
    MutationResult,
    MutationStatus,
    Record,
    RecordSet,
    SessionKind,
    SortDirection,
    UpdatePayload,
    ViewState,
    record_id,
)
from recordgrid.domain.repositories import INavigator, IPersistenceGateway
from recordgrid.errors import (
    MutationFailedError,
    PolicyViolationError,
    RecordGridError,
    RecordNotFoundError,
)
from recordgrid.errors.handler import ErrorHandler, ErrorSeverity
from recordgrid.events import (
    EventBus,
    MutationCompletedEvent,
    MutationSubmittedEvent,
    RecordSetLoadedEvent,
    RecordSetRefreshedEvent,
)
from recordgrid.viewmodels.base import BaseViewModel
from recordgrid.viewmodels.signal import ObservableProperty, Signal


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a synchronous grid command."""
    success: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class ViewSnapshot:
    """Everything a consumer needs to draw the grid at one point in time."""

    state: ViewState = field(default_factory=ViewState)
    visible: Tuple[Record, ...] = ()
    filtered_count: int = 0
    total_count: int = 0
    total_pages: int = 0
    selection: FrozenSet[Hashable] = frozenset()
    session: SessionKind = SessionKind.CLOSED
    edit_fields: Tuple[FormField, ...] = ()
    can_bulk_edit: bool = False

    @property
    def page_index(self) -> int:
        return self.state.page_index

    @property
    def no_data(self) -> bool:
        return self.filtered_count == 0

    @property
    def can_previous(self) -> bool:
        return self.state.page_index > 1

    @property
    def can_next(self) -> bool:
        return self.state.page_index < self.total_pages

    @property
    def page_info(self) -> str:
        return PAGE_INFO_TEMPLATE.format(page=self.state.page_index, total=self.total_pages)


def _resolved(result: MutationResult) -> "Future[MutationResult]":
    future: Future = Future()
    future.set_result(result)
    return future


class ViewController(BaseViewModel):
    """Orchestrates filtering, sorting, paging, selection and edit sessions.

    Public operations are serialised by one re-entrant lock, so gateway
    callbacks arriving on another thread wait for the running operation.
    """

    def __init__(
        self,
        gateway: Optional[IPersistenceGateway] = None,
        navigator: Optional[INavigator] = None,
        options: Optional[GridOptions] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__()
        self._options = options or GridOptions()
        self._gateway = gateway
        self._navigator = navigator
        self._event_bus = event_bus or EventBus()
        self._logger = logging.getLogger(__name__)
        self._error_handler = error_handler or ErrorHandler(self._logger, self._event_bus)
        self._lock = threading.RLock()

        self._record_set = RecordSet(id_field=self._options.id_field)
        self._view_state = ViewState(page_size=self._options.page_size)
        self._filtered: List[Record] = []
        self._paginator = Paginator(self._options.page_size)
        self._selection = SelectionTracker(self._options.bulk_edit_min_selection)
        self._sessions = EditSessionManager(self._selection, self._options.id_field)

        # Observable properties
        self.snapshot = ObservableProperty(ViewSnapshot(state=self._view_state))

        # Signals
        self.view_changed = Signal()  # emits (ViewSnapshot)
        self.mutation_requested = Signal()  # emits (payload)
        self.mutation_completed = Signal()  # emits (payload, MutationResult)
        self.mutation_failed = Signal()  # emits (message, payload)
        self.refreshed = Signal()  # emits (RecordSet)
        self.denied = Signal()  # emits (operation, reason)

        self.subscribe_event(self._event_bus, RecordSetRefreshedEvent, self._on_record_set_refreshed)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **kwargs: Any) -> "ViewController":
        return cls(options=GridOptions.from_settings(settings), **kwargs)

    # -- properties --------------------------------------------------------

    @property
    def options(self) -> GridOptions:
        return self._options

    @property
    def record_set(self) -> RecordSet:
        return self._record_set

    @property
    def view_state(self) -> ViewState:
        return self._view_state

    @property
    def selection(self) -> FrozenSet[Hashable]:
        return self._selection.selected

    @property
    def session_state(self) -> SessionKind:
        return self._sessions.state

    @property
    def edit_overlay(self) -> Dict[str, Any]:
        return self._sessions.overlay

    # -- read path ---------------------------------------------------------

    def load(self, record_set: RecordSet) -> ViewSnapshot:
        """Replace the record set and recompute from page 1."""
        with self._lock:
            self._record_set = record_set
            self._view_state = self._view_state.with_page(1)
            snapshot = self._recompute()
            self._logger.info(
                "Loaded %d record(s), %d match the current search",
                len(record_set),
                len(self._filtered),
            )
            self._event_bus.publish(
                RecordSetLoadedEvent(
                    source=__name__,
                    record_count=len(record_set),
                    filtered_count=len(self._filtered),
                )
            )
            return snapshot

    def search(self, term: Optional[str]) -> ViewSnapshot:
        with self._lock:
            self._view_state = self._view_state.with_search(term or "")
            return self._recompute()

    def sort(self, field: Optional[str], direction: Any = SortDirection.ASC) -> ViewSnapshot:
        with self._lock:
            self._view_state = self._view_state.with_sort(field, SortDirection.parse(direction))
            return self._recompute()

    def set_page_size(self, page_size: int) -> ViewSnapshot:
        with self._lock:
            if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size <= 0:
                self._deny("set_page_size", f"Page size must be a positive integer, got {page_size!r}")
                return self.snapshot.value
            self._view_state = self._view_state.with_page_size(page_size)
            self._paginator.set_page_size(page_size)
            return self._recompute()

    def next_page(self) -> ViewSnapshot:
        with self._lock:
            return self._after_navigation(self._paginator.next_page().page)

    def previous_page(self) -> ViewSnapshot:
        with self._lock:
            return self._after_navigation(self._paginator.previous_page().page)

    def go_to_page(self, page_index: int) -> ViewSnapshot:
        with self._lock:
            return self._after_navigation(self._paginator.go_to(page_index).page)

    # -- selection ---------------------------------------------------------

    def select_rows(self, ids: Iterable[Hashable]) -> ViewSnapshot:
        """Replace the selection, keeping only ids present in the filtered view."""
        with self._lock:
            valid = self._filtered_ids()
            wanted = set(ids)
            ignored = wanted - valid
            if ignored:
                self._logger.debug("Ignoring %d id(s) outside the filtered view", len(ignored))
            self._selection.set_selection(wanted & valid)
            return self._publish()

    # -- edit sessions -----------------------------------------------------

    def open_edit(self, identifier: Hashable) -> CommandResult:
        with self._lock:
            try:
                record = self._require_record(identifier)
                self._sessions.open_single_edit(record, self._record_set.columns)
            except RecordGridError as exc:
                return self._deny("open_edit", str(exc))
            self._publish()
            return CommandResult()

    def open_bulk_edit(self) -> CommandResult:
        with self._lock:
            try:
                if not self._options.features.bulk_edit_enabled:
                    raise PolicyViolationError("Bulk edit is disabled for this grid")
                order = [record_id(r, self._record_set.id_field) for r in self._record_set]
                self._sessions.open_bulk_edit(self._record_set.columns, order=order)
            except RecordGridError as exc:
                return self._deny("open_bulk_edit", str(exc))
            self._publish()
            return CommandResult()

    def open_create(self) -> CommandResult:
        with self._lock:
            self._sessions.open_create(self._record_set.columns)
            self._publish()
            return CommandResult()

    def set_edit_field(self, name: str, value: Any) -> CommandResult:
        """Merge one field edit into the open session's overlay.

        A field the session does not accept is dropped: the result reports it
        but no denial is raised.
        """
        with self._lock:
            try:
                accepted = self._sessions.set_field(name, value)
            except RecordGridError as exc:
                return self._deny("set_edit_field", str(exc))
            self._publish()
            if not accepted:
                return CommandResult(success=False, error=f"Field '{name}' is not editable here")
            return CommandResult()

    def set_edit_fields(self, values: Mapping[str, Any]) -> CommandResult:
        """Merge several field edits at once; the error names any dropped fields."""
        with self._lock:
            try:
                dropped = self._sessions.set_fields(dict(values))
            except RecordGridError as exc:
                return self._deny("set_edit_fields", str(exc))
            self._publish()
            if dropped:
                names = ", ".join(repr(name) for name in dropped)
                return CommandResult(success=False, error=f"Not editable here: {names}")
            return CommandResult()

    def cancel_edit(self) -> CommandResult:
        with self._lock:
            if self._sessions.cancel():
                self._publish()
            return CommandResult()

    def commit_edit(self) -> "Future[MutationResult]":
        """Submit the open session.  The session closes at submission time."""
        with self._lock:
            try:
                payload = self._sessions.commit()
            except RecordGridError as exc:
                self._deny("commit_edit", str(exc))
                return _resolved(MutationResult.denied(str(exc)))
            self._publish()
            return self._submit([payload])

    def request_delete(self, identifier: Hashable) -> "Future[MutationResult]":
        """Ask the gateway to delete *identifier*; the row stays until the next load."""
        with self._lock:
            try:
                self._require_record(identifier)
            except RecordGridError as exc:
                self._deny("request_delete", str(exc))
                return _resolved(MutationResult.denied(str(exc)))
            return self._submit([DeletePayload(target=identifier)])

    def save_drafts(self, drafts: Sequence[Mapping[str, Any]]) -> "Future[MutationResult]":
        """Submit inline cell edits, one update per draft row.

        Each draft maps the id field to the row's identifier plus the edited
        fields.  Non-editable fields are dropped, as are drafts left empty.
        The open edit session, if any, is not touched.
        """
        with self._lock:
            id_field = self._record_set.id_field
            editable = {col.field_name for col in self._record_set.editable_columns}
            payloads: List[MutationPayload] = []
            for draft in drafts:
                identifier = record_id(draft, id_field)
                if identifier is None or identifier not in self._record_set:
                    self._logger.warning("Skipping draft for unknown record %r", identifier)
                    continue
                fields = {k: v for k, v in draft.items() if k in editable and k != id_field}
                if fields:
                    payloads.append(UpdatePayload(targets=(identifier,), fields=fields))
            if not payloads:
                reason = "No editable changes to save"
                self._deny("save_drafts", reason)
                return _resolved(MutationResult.denied(reason))
            return self._submit(payloads)

    # -- navigation / row actions -----------------------------------------

    def open_record(self, identifier: Hashable) -> CommandResult:
        with self._lock:
            try:
                if not self._options.features.navigation_enabled or self._navigator is None:
                    raise PolicyViolationError("Record navigation is not available")
                self._require_record(identifier)
            except RecordGridError as exc:
                return self._deny("open_record", str(exc))
        self._navigator.open_record(identifier)
        return CommandResult()

    def handle_row_action(self, action: str, identifier: Hashable) -> CommandResult:
        """Dispatch a row menu action (``view``, ``edit`` or ``delete``).

        Deletion completes asynchronously; watch ``mutation_completed``.
        """
        if action == ROW_ACTION_VIEW:
            return self.open_record(identifier)
        if action == ROW_ACTION_EDIT:
            return self.open_edit(identifier)
        if action == ROW_ACTION_DELETE:
            result = self.request_delete(identifier)
            if result.done() and result.result().status is MutationStatus.DENIED:
                return CommandResult(success=False, error=result.result().message)
            return CommandResult()
        return self._deny("handle_row_action", f"Unknown row action: {action!r}")

    # -- internal: pipeline ------------------------------------------------

    def _recompute(self) -> ViewSnapshot:
        state = self._view_state
        self._filtered = filter_records(self._record_set.records, state.search_term)
        ordered = sort_records(self._filtered, state.sort_field, state.sort_direction)
        self._selection.prune(self._filtered_ids())
        page = self._paginator.reset(ordered, state.page_index)
        self._view_state = state.with_page(page.page)
        return self._publish()

    def _after_navigation(self, page_index: int) -> ViewSnapshot:
        self._view_state = self._view_state.with_page(page_index)
        return self._publish()

    def _filtered_ids(self) -> set:
        id_field = self._record_set.id_field
        return {
            identifier
            for identifier in (record_id(r, id_field) for r in self._filtered)
            if identifier is not None
        }

    def _publish(self) -> ViewSnapshot:
        page = self._paginator.result
        snapshot = ViewSnapshot(
            state=self._view_state,
            visible=tuple(page.items),
            filtered_count=len(self._filtered),
            total_count=len(self._record_set),
            total_pages=page.total_pages,
            selection=self._selection.selected,
            session=self._sessions.state,
            edit_fields=tuple(self._sessions.form_fields()),
            can_bulk_edit=(
                self._options.features.bulk_edit_enabled and self._selection.can_bulk_edit
            ),
        )
        self.snapshot.value = snapshot
        self.view_changed.emit(snapshot)
        return snapshot

    def _require_record(self, identifier: Hashable) -> Record:
        record = self._record_set.get(identifier) if identifier in self._record_set else None
        if record is None:
            raise RecordNotFoundError(f"No record with {self._record_set.id_field}={identifier!r}")
        return record

    def _deny(self, operation: str, reason: str) -> CommandResult:
        self._logger.warning("%s refused: %s", operation, reason)
        self.denied.emit(operation, reason)
        return CommandResult(success=False, error=reason)

    # -- internal: write path ----------------------------------------------

    def _submit(self, payloads: List[MutationPayload]) -> "Future[MutationResult]":
        outer: Future = Future()
        inner: List[Future] = []
        for payload in payloads:
            self.mutation_requested.emit(payload)
            self._event_bus.publish(MutationSubmittedEvent(source=__name__, payload=payload))
            inner.append(self._dispatch(payload))

        pending = [len(inner)]
        counter_lock = threading.Lock()

        def _on_done(_: Future) -> None:
            with counter_lock:
                pending[0] -= 1
                if pending[0]:
                    return
            try:
                result = self._finish(payloads, inner)
            except Exception as exc:
                self._logger.exception("Completing %d mutation(s) failed", len(payloads))
                result = MutationResult.failure(str(exc))
            outer.set_result(result)

        for future in inner:
            future.add_done_callback(_on_done)
        return outer

    def _dispatch(self, payload: MutationPayload) -> "Future[MutationResult]":
        if self._gateway is None or not self._options.features.remote_save_enabled:
            return _resolved(MutationResult.deferred())
        self._logger.info("Submitting %s payload", payload.kind.value)
        try:
            return self._gateway.submit(payload)
        except Exception as exc:
            return _resolved(MutationResult.failure(str(exc)))

    def _finish(
        self,
        payloads: List[MutationPayload],
        futures: List["Future[MutationResult]"],
    ) -> MutationResult:
        results = []
        for future in futures:
            try:
                result = future.result()
            except Exception as exc:
                result = MutationResult.failure(str(exc))
            if not isinstance(result, MutationResult):
                result = MutationResult.failure(f"Unexpected gateway reply: {result!r}")
            results.append(result)

        with self._lock:
            for payload, result in zip(payloads, results):
                self._event_bus.publish(
                    MutationCompletedEvent(
                        source=__name__,
                        payload=payload,
                        succeeded=result.status is not MutationStatus.FAILED,
                        message=result.message,
                    )
                )
                self.mutation_completed.emit(payload, result)
                if result.status is MutationStatus.FAILED:
                    self._error_handler.handle(
                        MutationFailedError(result.message or ""),
                        ErrorSeverity.ERROR,
                        {"kind": payload.kind.value},
                    )
                    self.mutation_failed.emit(result.message, payload)

            fresh = None
            if any(r.ok for r in results):
                # Reload only after the acknowledgment, before the caller resumes
                fresh = next(
                    (r.record_set for r in reversed(results) if r.record_set is not None), None
                )
                fresh = fresh if fresh is not None else self._fetch()
                if fresh is not None:
                    self.load(fresh)
                    self.refreshed.emit(fresh)

            failure = next((r for r in results if r.status is MutationStatus.FAILED), None)
            if failure is not None:
                return failure
            if all(r.status is MutationStatus.DEFERRED for r in results):
                return MutationResult.deferred()
            return MutationResult.success(fresh)

    def _fetch(self) -> Optional[RecordSet]:
        if self._gateway is None:
            return None
        try:
            return self._gateway.fetch()
        except Exception as exc:
            self._error_handler.handle(exc, ErrorSeverity.WARNING, {"phase": "refresh"})
            return None

    # -- EventBus handlers -------------------------------------------------

    def _on_record_set_refreshed(self, event: RecordSetRefreshedEvent) -> None:
        if event.record_set is not None:
            self.load(event.record_set)
