"""Default configuration values for recordgrid."""

from __future__ import annotations

from typing import Final

# Identifier field used when a record set does not name its own.  The value
# matches the primary key name of the CRM objects the grid was first built for.
DEFAULT_ID_FIELD: Final[str] = "Id"

DEFAULT_PAGE_SIZE: Final[int] = 10

# Bulk editing is offered only when at least this many rows are selected.  The
# threshold is a policy knob, overridable through ``bulk_edit.min_selection``.
BULK_EDIT_MIN_SELECTION: Final[int] = 2

SETTINGS_SCHEMA_ID: Final[str] = "recordgrid/settings@1"
SETTINGS_FILE_NAME: Final[str] = "settings.json"

PAGE_INFO_TEMPLATE: Final[str] = "Page {page} of {total}"

# Row actions understood by ``ViewController.handle_row_action``.
ROW_ACTION_VIEW: Final[str] = "view"
ROW_ACTION_EDIT: Final[str] = "edit"
ROW_ACTION_DELETE: Final[str] = "delete"
