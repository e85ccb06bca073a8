"""Page slicing over an already filtered and sorted record sequence.

``paginate`` is the pure computation; ``Paginator`` keeps the ordered records
and the current page between navigation calls so that moving between pages
never re-runs filtering or sorting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from recordgrid.config import DEFAULT_PAGE_SIZE
from recordgrid.domain.models import Record

LOGGER = logging.getLogger(__name__)


def total_pages_for(count: int, page_size: int) -> int:
    if page_size <= 0 or count <= 0:
        return 0
    return (count + page_size - 1) // page_size


def clamp_page(page_index: int, total_pages: int) -> int:
    return max(1, min(page_index, max(1, total_pages)))


@dataclass
class PageResult:
    """The visible slice and the numbers the pager controls need."""

    items: List[Record] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0
    # Page number that was asked for, before clamping
    requested_page: int = 1

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_count, self.page_size)

    @property
    def no_data(self) -> bool:
        return self.total_count == 0

    @property
    def was_clamped(self) -> bool:
        """``True`` when the requested page lay outside ``1..total_pages``."""
        return self.requested_page != self.page

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(records: Sequence[Record], page_size: int, page_index: int = 1) -> PageResult:
    """Slice *records* to the page *page_index*, clamped into range."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    count = len(records)
    page = clamp_page(page_index, total_pages_for(count, page_size))
    start = (page - 1) * page_size
    return PageResult(
        items=list(records[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_count=count,
        requested_page=page_index,
    )


class Paginator:
    """Stateful pager over one ordered record sequence."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._page_size = page_size
        self._records: List[Record] = []
        self._page = 1
        self._result = paginate(self._records, self._page_size, self._page)

    # -- properties --------------------------------------------------------

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        return self._result.total_pages

    @property
    def result(self) -> PageResult:
        return self._result

    # -- public API --------------------------------------------------------

    def reset(self, records: Sequence[Record], page_index: int = 1) -> PageResult:
        """Replace the ordered records and jump to *page_index* (clamped)."""
        self._records = list(records)
        return self.go_to(page_index)

    def set_page_size(self, page_size: int) -> PageResult:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._page_size = page_size
        return self.go_to(1)

    def go_to(self, page_index: int) -> PageResult:
        self._result = paginate(self._records, self._page_size, page_index)
        if self._result.was_clamped:
            LOGGER.debug(
                "Requested page %s clamped to %s of %s",
                page_index,
                self._result.page,
                self._result.total_pages,
            )
        self._page = self._result.page
        return self._result

    def next_page(self) -> PageResult:
        """Advance one page; no-op on the last page."""
        if self._page < self.total_pages:
            return self.go_to(self._page + 1)
        return self._result

    def previous_page(self) -> PageResult:
        """Go back one page; no-op on the first page."""
        if self._page > 1:
            return self.go_to(self._page - 1)
        return self._result
