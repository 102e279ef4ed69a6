"""
Row selection for bulk actions.
"""

from typing import Any, Iterable, List


class SelectionState:
    """Ordered set of selected row ids, stored as strings."""

    def __init__(self, ids: Iterable[Any] = ()):
        self._ids: List[str] = []
        for row_id in ids:
            self.select(row_id)

    def select(self, row_id: Any) -> None:
        key = str(row_id)
        if key not in self._ids:
            self._ids.append(key)

    def deselect(self, row_id: Any) -> None:
        key = str(row_id)
        if key in self._ids:
            self._ids.remove(key)

    def toggle(self, row_id: Any) -> bool:
        """Toggle ``row_id``; returns True when it ends up selected."""
        if self.is_selected(row_id):
            self.deselect(row_id)
            return False
        self.select(row_id)
        return True

    def toggle_all(self, page_ids: Iterable[Any]) -> bool:
        """Select every id of the page, or deselect them when all are selected."""
        page_ids = [str(row_id) for row_id in page_ids]
        if self.is_all_selected(page_ids):
            for row_id in page_ids:
                self.deselect(row_id)
            return False
        for row_id in page_ids:
            self.select(row_id)
        return True

    def is_selected(self, row_id: Any) -> bool:
        return str(row_id) in self._ids

    def is_all_selected(self, page_ids: Iterable[Any]) -> bool:
        page_ids = [str(row_id) for row_id in page_ids]
        return bool(page_ids) and all(row_id in self._ids for row_id in page_ids)

    def clear(self) -> None:
        self._ids = []

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)
