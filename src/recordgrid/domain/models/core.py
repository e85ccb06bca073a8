from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Sequence, Tuple

from recordgrid.config import DEFAULT_ID_FIELD

# A record is a flat mapping of field name to scalar value.
Record = Mapping[str, Any]


class ColumnType(str, Enum):
    # Mirrors the cell types the hosting data grid knows how to render
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENT = "percent"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"

    @classmethod
    def parse(cls, value: Any) -> "ColumnType":
        """Return the matching member, falling back to ``TEXT`` for unknown input."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.TEXT


@dataclass(frozen=True)
class Column:
    field_name: str
    label: str = ""
    editable: bool = False
    type: ColumnType = ColumnType.TEXT

    @property
    def display_label(self) -> str:
        return self.label or self.field_name

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, force_editable: bool = False) -> "Column":
        """Build a column from a loosely shaped mapping.

        Accepts both ``fieldName`` (wire format) and ``field_name`` keys; a
        missing label falls back to the field name.
        """
        name = data.get("fieldName", data.get("field_name", ""))
        name = "" if name is None else str(name)
        return cls(
            field_name=name,
            label=str(data.get("label") or name),
            editable=force_editable or bool(data.get("editable", False)),
            type=ColumnType.parse(data.get("type")),
        )


@dataclass(frozen=True)
class RecordSet:
    """Records and columns delivered by one load/refresh.

    The container is replaced wholesale on every refresh and never edited in
    place.  ``records`` keep their delivery order.
    """

    records: Tuple[Record, ...] = ()
    columns: Tuple[Column, ...] = ()
    id_field: str = DEFAULT_ID_FIELD
    _index: Dict[Hashable, Record] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Normalise list input so equality compares like with like
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "columns", tuple(self.columns))
        index: Dict[Hashable, Record] = {}
        for record in self.records:
            identifier = record_id(record, self.id_field)
            if identifier is not None and identifier not in index:
                index[identifier] = record
        object.__setattr__(self, "_index", index)

    @classmethod
    def build(
        cls,
        records: Sequence[Record],
        columns: Sequence[Any],
        id_field: str = DEFAULT_ID_FIELD,
    ) -> "RecordSet":
        """Create a record set, accepting column mappings as well as ``Column``."""
        cols = [
            c if isinstance(c, Column) else Column.from_mapping(c)
            for c in columns
        ]
        return cls(records=tuple(records), columns=tuple(cols), id_field=id_field)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def get(self, identifier: Hashable) -> Optional[Record]:
        return self._index.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        try:
            return identifier in self._index
        except TypeError:
            return False

    def column(self, field_name: str) -> Optional[Column]:
        for col in self.columns:
            if col.field_name == field_name:
                return col
        return None

    @property
    def editable_columns(self) -> List[Column]:
        return [col for col in self.columns if col.editable]

    def identifiers(self) -> List[Hashable]:
        return list(self._index)


def record_id(record: Any, id_field: str = DEFAULT_ID_FIELD) -> Optional[Hashable]:
    """Return the identifier of *record*, or ``None`` when it has no usable id."""
    if not isinstance(record, Mapping):
        return None
    value = record.get(id_field)
    if value is None or value == "":
        return None
    try:
        hash(value)
    except TypeError:
        return None
    return value
