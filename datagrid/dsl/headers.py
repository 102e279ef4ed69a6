"""
Header declarations.

A header is a labelled slot in the table head, optionally bound to a column.
Headers can be sortable under their own sort key, which lets a grid sort by
a field that is not rendered as a column.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..constants import VIEWPORTS
from ..exceptions import DefinitionError
from .base import Visibility, evaluate_visibility
from .columns import Column


class Header:
    def __init__(self, label: str, column: Optional[Column] = None):
        self.label = label
        self.column = column
        self.sort_key: Optional[str] = None
        self.visibility: Visibility = True
        self.viewports: Sequence[str] = ()

    @classmethod
    def make(cls, label: str, column: Optional[Column] = None) -> "Header":
        return cls(label, column)

    @classmethod
    def for_column(cls, column: Column) -> "Header":
        header = cls(column.label, column)
        if column.is_sortable:
            header.sort_key = column.key
        return header

    def sortable(self, sort_key: Optional[str] = None) -> "Header":
        key = sort_key or (self.column.key if self.column else None)
        if key is None:
            raise DefinitionError(
                f"Header '{self.label}' needs a sort key or a bound column",
                item_key=self.label,
            )
        self.sort_key = key
        return self

    def show(self, flag: Visibility = True) -> "Header":
        self.visibility = flag
        return self

    def show_in_viewports_only(self, *viewports: str) -> "Header":
        unknown = [vp for vp in viewports if vp not in VIEWPORTS]
        if unknown:
            raise DefinitionError(
                f"Unknown viewports {unknown} on header '{self.label}'",
                item_key=self.label,
            )
        self.viewports = tuple(viewports)
        return self

    @property
    def key(self) -> str:
        if self.column is not None:
            return self.column.key
        return self.sort_key or self.label

    @property
    def is_sortable(self) -> bool:
        return self.sort_key is not None

    @property
    def viewport_classes(self) -> str:
        if not self.viewports:
            return ""
        return " ".join(["hidden"] + [f"{vp}:table-cell" for vp in self.viewports])

    def is_visible(self, user: Any = None) -> bool:
        if not evaluate_visibility(self.visibility, user):
            return False
        if self.column is not None and not self.column.is_visible(user):
            return False
        return True

    def to_view(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "sortable": self.is_sortable,
            "sort_key": self.sort_key,
            "viewport_classes": self.viewport_classes,
            "column": self.column.to_view() if self.column is not None else None,
        }
