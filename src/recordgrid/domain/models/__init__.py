from .core import Column, ColumnType, Record, RecordSet, record_id
from .options import FeatureFlags, GridOptions
from .payload import (
    CreatePayload,
    DeletePayload,
    MutationPayload,
    MutationResult,
    MutationStatus,
    PAYLOAD_SCHEMA,
    PayloadKind,
    UpdatePayload,
    validate_payload,
)
from .session import BulkEdit, Create, EditSession, SessionKind, SingleEdit
from .view_state import SortDirection, ViewState

__all__ = [
    "BulkEdit",
    "Column",
    "ColumnType",
    "Create",
    "CreatePayload",
    "DeletePayload",
    "EditSession",
    "FeatureFlags",
    "GridOptions",
    "MutationPayload",
    "MutationResult",
    "MutationStatus",
    "PAYLOAD_SCHEMA",
    "PayloadKind",
    "Record",
    "RecordSet",
    "SessionKind",
    "SingleEdit",
    "SortDirection",
    "UpdatePayload",
    "ViewState",
    "record_id",
    "validate_payload",
]
