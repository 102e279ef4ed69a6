"""
Paginated query result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class PaginatedResult:
    rows: List[Any] = field(default_factory=list)
    page: int = 1
    per_page: int = 15
    total: int = 0
    last_page: int = 1

    @property
    def from_item(self) -> int:
        if not self.total:
            return 0
        return (self.page - 1) * self.per_page + 1

    @property
    def to_item(self) -> int:
        if not self.total:
            return 0
        return min(self.page * self.per_page, self.total)

    @property
    def has_next(self) -> bool:
        return self.page < self.last_page

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def row_ids(self) -> List[Any]:
        return [getattr(row, "pk", None) for row in self.rows]

    def page_info(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "last_page": self.last_page,
            "from": self.from_item,
            "to": self.to_item,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }
