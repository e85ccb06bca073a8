from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from recordgrid.config import DEFAULT_PAGE_SIZE


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() in ("desc", "descending"):
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class ViewState:
    """Search/sort/page parameters the consumer has asked for.

    Instances are immutable; every mutator on the controller produces a new
    value through the ``with_*`` helpers.
    """

    search_term: str = ""
    sort_field: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC
    page_index: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.page_index < 1:
            raise ValueError(f"page_index must be >= 1, got {self.page_index}")

    def with_search(self, term: str) -> "ViewState":
        return replace(self, search_term=term, page_index=1)

    def with_sort(self, field: Optional[str], direction: SortDirection) -> "ViewState":
        return replace(self, sort_field=field or None, sort_direction=direction, page_index=1)

    def with_page_size(self, page_size: int) -> "ViewState":
        return replace(self, page_size=page_size, page_index=1)

    def with_page(self, page_index: int) -> "ViewState":
        return replace(self, page_index=page_index)
