"""Read record sets from JSON documents.

Two document shapes are accepted, both with a ``columns`` list::

    {"records": [...], "columns": [...]}
    {"rows": [...], "columns": [...]}        # data-source wire shape

Records must be JSON objects.  Columns need a ``fieldName`` (or
``field_name``); everything else is optional.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft202012Validator, ValidationError

from recordgrid.config import DEFAULT_ID_FIELD
from recordgrid.domain.models import Column, RecordSet
from recordgrid.errors import RecordSetLoadError
from recordgrid.utils.jsonio import read_json

LOGGER = logging.getLogger(__name__)

RECORD_SET_SCHEMA: dict[str, Any] = {
    "$id": "recordgrid/record-set.schema.json",
    "type": "object",
    "required": ["columns"],
    "anyOf": [{"required": ["records"]}, {"required": ["rows"]}],
    "properties": {
        "id_field": {"type": "string", "minLength": 1},
        "records": {"type": "array", "items": {"type": "object"}},
        "rows": {"type": "array", "items": {"type": "object"}},
        "columns": {
            "type": "array",
            "items": {
                "type": "object",
                "anyOf": [{"required": ["fieldName"]}, {"required": ["field_name"]}],
                "properties": {
                    "fieldName": {"type": "string"},
                    "field_name": {"type": "string"},
                    "label": {"type": ["string", "null"]},
                    "editable": {"type": "boolean"},
                    "type": {"type": ["string", "null"]},
                },
            },
        },
    },
}

_validator = Draft202012Validator(RECORD_SET_SCHEMA)


def parse_record_set(
    document: Mapping[str, Any],
    *,
    id_field: str | None = None,
    all_editable: bool = False,
) -> RecordSet:
    """Build a :class:`RecordSet` from an already decoded JSON document.

    ``all_editable`` marks every column editable regardless of its own flag.
    """

    try:
        _validator.validate(document)
    except ValidationError as exc:
        raise RecordSetLoadError(f"Invalid record set: {exc.message}") from exc

    records = document.get("records")
    if records is None:
        records = document.get("rows", [])
    columns = [Column.from_mapping(c, force_editable=all_editable) for c in document["columns"]]
    field = id_field or document.get("id_field") or DEFAULT_ID_FIELD
    return RecordSet(records=tuple(records), columns=tuple(columns), id_field=field)


def load_record_set(
    path: Path,
    *,
    id_field: str | None = None,
    all_editable: bool = False,
) -> RecordSet:
    """Read and validate the record-set file at *path*."""

    try:
        document = read_json(path)
    except (OSError, ValueError) as exc:
        raise RecordSetLoadError(f"{path}: {exc}") from exc
    if not isinstance(document, dict):
        raise RecordSetLoadError(f"{path}: expected a JSON object")
    record_set = parse_record_set(document, id_field=id_field, all_editable=all_editable)
    LOGGER.info(
        "Loaded %d record(s) and %d column(s) from %s",
        len(record_set.records),
        len(record_set.columns),
        path,
    )
    return record_set
