"""
Grid view state.

``GridState`` is the submitted state of one grid (search text, sort, page
size, page and filter values). It converts to and from the persisted
preference bag, which never includes the page.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .constants import (
    PREF_FILTERS,
    PREF_PER_PAGE,
    PREF_SEARCH,
    PREF_SORT_BY,
    PREF_SORT_DIRECTION,
    SORT_ASC,
    SORT_DIRECTIONS,
)


def normalize_direction(direction: Any, default: str = SORT_ASC) -> str:
    value = str(direction or "").lower()
    return value if value in SORT_DIRECTIONS else default


@dataclass
class GridState:
    search: str = ""
    sort_by: Optional[str] = None
    sort_direction: str = SORT_ASC
    per_page: Optional[int] = None
    page: int = 1
    filters: Dict[str, Any] = field(default_factory=dict)

    def copy(self, **changes: Any) -> "GridState":
        if "filters" not in changes:
            changes["filters"] = dict(self.filters)
        return replace(self, **changes)

    def to_preferences(self) -> Dict[str, Any]:
        return {
            PREF_SEARCH: self.search,
            PREF_SORT_BY: self.sort_by,
            PREF_SORT_DIRECTION: self.sort_direction,
            PREF_PER_PAGE: self.per_page,
            PREF_FILTERS: dict(self.filters),
        }

    @classmethod
    def from_preferences(cls, bag: Optional[Dict[str, Any]]) -> "GridState":
        bag = bag or {}
        per_page = bag.get(PREF_PER_PAGE)
        return cls(
            search=bag.get(PREF_SEARCH) or "",
            sort_by=bag.get(PREF_SORT_BY),
            sort_direction=normalize_direction(bag.get(PREF_SORT_DIRECTION)),
            per_page=int(per_page) if per_page else None,
            filters=dict(bag.get(PREF_FILTERS) or {}),
        )
