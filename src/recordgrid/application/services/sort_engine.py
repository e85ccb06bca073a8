"""Column sorting for record sequences."""

from __future__ import annotations

import math
from decimal import Decimal
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from recordgrid.domain.models import Record, SortDirection

# Rank buckets keep values of unrelated types comparable: missing/falsy values
# compare as the empty string and come first, then numbers, then text.
_RANK_EMPTY = -1
_RANK_NUMBER = 0
_RANK_TEXT = 1


def sort_key(value: Any) -> Tuple[int, Any]:
    """Return a total-order key for a single cell value."""
    if not value:
        return (_RANK_EMPTY, "")
    if isinstance(value, (Real, Decimal)) and not isinstance(value, bool):
        number = float(value)
        if math.isnan(number):
            return (_RANK_EMPTY, "")
        return (_RANK_NUMBER, number)
    if isinstance(value, str):
        return (_RANK_TEXT, value)
    return (_RANK_TEXT, str(value))


def _field_value(record: Record, field: str) -> Any:
    if not isinstance(record, Mapping):
        return None
    return record.get(field)


def sort_records(
    records: Sequence[Record],
    field: Optional[str],
    direction: SortDirection = SortDirection.ASC,
) -> List[Record]:
    """Return *records* ordered by *field*.

    Without a field the input order is kept.  The sort is stable in both
    directions: ``DESC`` reverses the comparison, so tied records stay in
    their input order.
    """
    if not field:
        return list(records)
    return sorted(
        records,
        key=lambda record: sort_key(_field_value(record, field)),
        reverse=direction is SortDirection.DESC,
    )
