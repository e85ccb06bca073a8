"""Tests for the edit session state machine."""

from __future__ import annotations

import pytest

from recordgrid.application.services.edit_session import EditSessionManager
from recordgrid.application.services.selection_tracker import SelectionTracker
from recordgrid.domain.models import (
    BulkEdit,
    CreatePayload,
    SessionKind,
    SingleEdit,
    UpdatePayload,
)
from recordgrid.errors import PolicyViolationError, RecordNotFoundError, SessionStateError


@pytest.fixture
def selection() -> SelectionTracker:
    return SelectionTracker()


@pytest.fixture
def manager(selection) -> EditSessionManager:
    return EditSessionManager(selection)


# ---------------------------------------------------------------------------
# Single edit
# ---------------------------------------------------------------------------


class TestSingleEdit:
    def test_seeds_overlay_with_editable_values_only(self, manager, accounts):
        record = accounts.get("a1")

        session = manager.open_single_edit(record, accounts.columns)

        assert isinstance(session, SingleEdit)
        assert manager.state is SessionKind.SINGLE_EDIT
        assert manager.overlay == {"Name": "Acme Corp", "Industry": "Manufacturing"}

    def test_holds_a_copy_of_the_record(self, manager, accounts):
        record = accounts.get("a1")
        manager.open_single_edit(record, accounts.columns)

        manager.set_field("Name", "Acme Holdings")

        assert record["Name"] == "Acme Corp"
        assert manager.session.base["Name"] == "Acme Corp"

    def test_non_editable_field_is_dropped(self, manager, accounts):
        manager.open_single_edit(accounts.get("a1"), accounts.columns)

        assert manager.set_field("Phone", "555-9999") is False
        assert "Phone" not in manager.overlay

    def test_last_write_wins(self, manager, accounts):
        manager.open_single_edit(accounts.get("a1"), accounts.columns)
        manager.set_field("Name", "First")
        manager.set_field("Name", "Second")
        assert manager.overlay["Name"] == "Second"

    def test_commit_produces_update_for_target(self, manager, accounts):
        manager.open_single_edit(accounts.get("a2"), accounts.columns)
        manager.set_field("Industry", "Utilities")
        manager.set_field("Phone", "555-0000")

        payload = manager.commit()

        assert payload == UpdatePayload(
            targets=("a2",), fields={"Name": "Globex", "Industry": "Utilities"}
        )
        assert manager.state is SessionKind.CLOSED

    def test_record_without_id_is_rejected(self, manager, accounts):
        with pytest.raises(RecordNotFoundError):
            manager.open_single_edit({"Name": "No id"}, accounts.columns)
        assert manager.state is SessionKind.CLOSED

    def test_missing_editable_field_is_not_seeded(self, manager, accounts):
        manager.open_single_edit({"Id": "x1", "Name": "Only name"}, accounts.columns)
        assert manager.overlay == {"Name": "Only name"}


# ---------------------------------------------------------------------------
# Bulk edit
# ---------------------------------------------------------------------------


class TestBulkEdit:
    def test_requires_two_selected(self, manager, selection, accounts):
        selection.set_selection(["a1"])

        with pytest.raises(PolicyViolationError):
            manager.open_bulk_edit(accounts.columns)

        assert manager.state is SessionKind.CLOSED

    def test_denied_bulk_keeps_existing_session(self, manager, selection, accounts):
        manager.open_create(accounts.columns)
        manager.set_field("Name", "Draft")
        selection.set_selection(["a1"])

        with pytest.raises(PolicyViolationError):
            manager.open_bulk_edit(accounts.columns)

        assert manager.state is SessionKind.CREATE
        assert manager.overlay == {"Name": "Draft"}

    def test_overlay_starts_empty_and_payload_has_only_set_fields(
        self, manager, selection, accounts
    ):
        selection.set_selection(["a3", "a1"])
        session = manager.open_bulk_edit(accounts.columns, order=["a1", "a2", "a3"])

        assert isinstance(session, BulkEdit)
        assert manager.overlay == {}
        manager.set_field("Industry", "Energy")

        payload = manager.commit()

        assert payload == UpdatePayload(targets=("a1", "a3"), fields={"Industry": "Energy"})

    def test_non_editable_field_is_dropped(self, manager, selection, accounts):
        selection.set_selection(["a1", "a2"])
        manager.open_bulk_edit(accounts.columns)

        assert manager.set_field("Id", "hijack") is False
        assert manager.overlay == {}


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_accepts_any_column(self, manager, accounts):
        manager.open_create(accounts.columns)

        assert manager.set_field("Phone", "555-1234") is True
        assert manager.set_field("Name", "Hooli") is True

        assert manager.commit() == CreatePayload(fields={"Phone": "555-1234", "Name": "Hooli"})

    def test_unknown_field_is_dropped(self, manager, accounts):
        manager.open_create(accounts.columns)
        assert manager.set_field("Nope", 1) is False

    def test_set_fields_reports_dropped_names(self, manager, accounts):
        manager.open_create(accounts.columns)
        assert manager.set_fields({"Name": "Hooli", "Nope": 1}) == ["Nope"]


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


class TestTransitions:
    def test_opening_new_session_discards_previous_overlay(self, manager, accounts):
        manager.open_single_edit(accounts.get("a1"), accounts.columns)
        manager.set_field("Name", "Changed")

        manager.open_create(accounts.columns)

        assert manager.state is SessionKind.CREATE
        assert manager.overlay == {}

    def test_cancel_discards_without_payload(self, manager, accounts):
        manager.open_single_edit(accounts.get("a1"), accounts.columns)
        manager.set_field("Name", "Changed")

        assert manager.cancel() is True

        assert manager.state is SessionKind.CLOSED
        assert manager.overlay == {}

    def test_cancel_when_closed(self, manager):
        assert manager.cancel() is False

    def test_set_field_requires_open_session(self, manager):
        with pytest.raises(SessionStateError):
            manager.set_field("Name", "x")

    def test_commit_requires_open_session(self, manager):
        with pytest.raises(SessionStateError):
            manager.commit()


class TestFormFields:
    def test_single_edit_lists_editable_columns_with_overlay(self, manager, accounts):
        manager.open_single_edit(accounts.get("a1"), accounts.columns)
        manager.set_field("Name", "Acme Holdings")

        fields = manager.form_fields()

        assert [(f.field_name, f.label, f.value) for f in fields] == [
            ("Name", "Account Name", "Acme Holdings"),
            ("Industry", "Industry", "Manufacturing"),
        ]

    def test_create_lists_every_column(self, manager, accounts):
        manager.open_create(accounts.columns)
        fields = manager.form_fields()
        assert [f.field_name for f in fields] == ["Id", "Name", "Industry", "Phone"]
        assert all(f.value is None for f in fields)

    def test_closed_has_no_fields(self, manager):
        assert manager.form_fields() == []
