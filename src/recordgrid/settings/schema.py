"""Schema helpers for the grid settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from recordgrid.config import (
    BULK_EDIT_MIN_SELECTION,
    DEFAULT_ID_FIELD,
    DEFAULT_PAGE_SIZE,
    SETTINGS_SCHEMA_ID,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "recordgrid/settings.schema.json",
    "type": "object",
    "required": ["schema", "id_field", "view", "bulk_edit", "features"],
    "properties": {
        "schema": {"const": SETTINGS_SCHEMA_ID},
        "id_field": {"type": "string", "minLength": 1},
        "view": {
            "type": "object",
            "properties": {
                "page_size": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": True,
        },
        "bulk_edit": {
            "type": "object",
            "properties": {
                "min_selection": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": True,
        },
        "features": {
            "type": "object",
            "properties": {
                "bulk_edit": {"type": "boolean"},
                "navigation": {"type": "boolean"},
                "remote_save": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": SETTINGS_SCHEMA_ID,
    "id_field": DEFAULT_ID_FIELD,
    "view": {"page_size": DEFAULT_PAGE_SIZE},
    "bulk_edit": {"min_selection": BULK_EDIT_MIN_SELECTION},
    "features": {
        "bulk_edit": True,
        "navigation": True,
        "remote_save": True,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

# Sections merged key by key so a partial file keeps the other defaults
_NESTED_SECTIONS = ("view", "bulk_edit", "features")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
