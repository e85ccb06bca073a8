"""Free-text record filtering."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from recordgrid.domain.models import Record

# Values whose ``str()`` is what a user sees in a cell.  Containers and other
# objects never match a search.
_SEARCHABLE_TYPES = (str, int, float, Decimal, date, datetime, time)


def _searchable_text(value: Any) -> Optional[str]:
    if not value or not isinstance(value, _SEARCHABLE_TYPES):
        return None
    return str(value).lower()


def record_matches(record: Record, needle: str) -> bool:
    """Return ``True`` when any field of *record* contains *needle*.

    *needle* must already be lowercased.
    """
    if not isinstance(record, Mapping):
        return False
    for value in record.values():
        text = _searchable_text(value)
        if text is not None and needle in text:
            return True
    return False


def filter_records(records: Sequence[Record], search_term: Optional[str]) -> List[Record]:
    """Return the records matching *search_term*, case-insensitively, in input order.

    An empty term keeps every record.  *records* is never modified.
    """
    if not search_term:
        return list(records)
    needle = search_term.lower()
    return [record for record in records if record_matches(record, needle)]
