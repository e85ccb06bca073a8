from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from recordgrid.config import (
    BULK_EDIT_MIN_SELECTION,
    DEFAULT_ID_FIELD,
    DEFAULT_PAGE_SIZE,
)


@dataclass(frozen=True)
class FeatureFlags:
    """Capabilities a grid instance exposes.

    One engine covers the plain, bulk-editing and navigating grid variants by
    switching these on or off.
    """

    bulk_edit_enabled: bool = True
    navigation_enabled: bool = True
    remote_save_enabled: bool = True


@dataclass(frozen=True)
class GridOptions:
    page_size: int = DEFAULT_PAGE_SIZE
    bulk_edit_min_selection: int = BULK_EDIT_MIN_SELECTION
    id_field: str = DEFAULT_ID_FIELD
    features: FeatureFlags = field(default_factory=FeatureFlags)

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]]) -> "GridOptions":
        """Build options from a settings mapping as produced by ``merge_with_defaults``."""
        if not settings:
            return cls()
        view = settings.get("view") or {}
        bulk = settings.get("bulk_edit") or {}
        features = settings.get("features") or {}
        return cls(
            page_size=int(view.get("page_size", DEFAULT_PAGE_SIZE)),
            bulk_edit_min_selection=int(bulk.get("min_selection", BULK_EDIT_MIN_SELECTION)),
            id_field=str(settings.get("id_field") or DEFAULT_ID_FIELD),
            features=FeatureFlags(
                bulk_edit_enabled=bool(features.get("bulk_edit", True)),
                navigation_enabled=bool(features.get("navigation", True)),
                remote_save_enabled=bool(features.get("remote_save", True)),
            ),
        )
