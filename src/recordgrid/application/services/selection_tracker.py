from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, Hashable, Iterable

from recordgrid.config import BULK_EDIT_MIN_SELECTION

LOGGER = logging.getLogger(__name__)


class SelectionTracker:
    """Selected record identifiers, independent of the current page.

    ``min_bulk_selection`` is the policy threshold for bulk editing; it is
    configurable and not a constraint of the data itself.
    """

    def __init__(self, min_bulk_selection: int = BULK_EDIT_MIN_SELECTION) -> None:
        self._selected: FrozenSet[Hashable] = frozenset()
        self._min_bulk_selection = max(1, min_bulk_selection)

    @property
    def selected(self) -> FrozenSet[Hashable]:
        return self._selected

    @property
    def min_bulk_selection(self) -> int:
        return self._min_bulk_selection

    def set_selection(self, ids: Iterable[Hashable]) -> FrozenSet[Hashable]:
        """Replace the selection wholesale."""
        self._selected = frozenset(ids)
        return self._selected

    def clear(self) -> None:
        self._selected = frozenset()

    def prune(self, valid_ids: AbstractSet[Hashable]) -> FrozenSet[Hashable]:
        """Drop every tracked id that is not in *valid_ids*; return the dropped ids."""
        stale = frozenset(i for i in self._selected if i not in valid_ids)
        if stale:
            LOGGER.debug("Pruned %d stale selected id(s)", len(stale))
            self._selected = self._selected - stale
        return stale

    def count(self) -> int:
        return len(self._selected)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._selected

    @property
    def can_bulk_edit(self) -> bool:
        return self.count() >= self._min_bulk_selection
