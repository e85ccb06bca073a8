"""Tabular view-state engine: search, sort, paging, selection and edit overlays."""

from .domain.models import (
    Column,
    ColumnType,
    FeatureFlags,
    GridOptions,
    MutationResult,
    MutationStatus,
    RecordSet,
    SortDirection,
    ViewState,
)
from .viewmodels import CommandResult, ViewController, ViewSnapshot

__version__ = "0.1.0"

__all__ = [
    "Column",
    "ColumnType",
    "CommandResult",
    "FeatureFlags",
    "GridOptions",
    "MutationResult",
    "MutationStatus",
    "RecordSet",
    "SortDirection",
    "ViewController",
    "ViewSnapshot",
    "ViewState",
]
