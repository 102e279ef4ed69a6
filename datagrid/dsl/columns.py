"""
Column declarations.

A column binds a model field (or a dot-separated relation path such as
``team.name``) to a label and a render type. Columns are neither sortable
nor searchable until the grid author opts in.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from django.db.models import Q, QuerySet

from ..constants import ColumnRenderType
from .base import Visibility, evaluate_visibility, humanize, project_for_view, to_lookup

SortStrategy = Callable[[QuerySet, str], QuerySet]
SearchStrategy = Callable[[str], Q]


class Column:
    """
    Fluent column builder.

    Example:
        Column.make("team.name", "Team").sortable().searchable()
        Column.make("status").render_as("badge", colors={"active": "green"})
        Column.make("total").sortable(lambda qs, direction: qs.order_by(...))
    """

    def __init__(self, key: str, label: Optional[str] = None):
        self.key = key
        self.label = label if label is not None else humanize(key)
        self.sort_strategy: Union[bool, SortStrategy] = False
        self.search_strategy: Union[bool, SearchStrategy] = False
        self.render_type: Any = ColumnRenderType.TEXT
        self.formatter: Optional[Callable[[Any, Any], Any]] = None
        self.content_accessor: Optional[Callable[[Any], Any]] = None
        self.css_class: Optional[str] = None
        self.column_width: Optional[str] = None
        self.no_wrap = False
        self.component_attributes: Dict[str, Any] = {}
        self.visibility: Visibility = True

    @classmethod
    def make(cls, key: str, label: Optional[str] = None) -> "Column":
        return cls(key, label)

    # Builder methods -------------------------------------------------------

    def sortable(self, strategy: Union[bool, SortStrategy] = True) -> "Column":
        """Enable sorting, optionally with a ``callable(queryset, direction)``."""
        self.sort_strategy = strategy
        return self

    def searchable(self, strategy: Union[bool, SearchStrategy] = True) -> "Column":
        """Enable search, optionally with a ``callable(term) -> Q``."""
        self.search_strategy = strategy
        return self

    def render_as(self, render_type: Any, **attributes: Any) -> "Column":
        self.render_type = render_type
        self.component_attributes.update(attributes)
        return self

    def format(self, formatter: Callable[[Any, Any], Any]) -> "Column":
        """Set a ``callable(value, row)`` applied to the raw value."""
        self.formatter = formatter
        return self

    def content(self, accessor: Callable[[Any], Any]) -> "Column":
        """Compute the cell value from the row instead of reading ``key``."""
        self.content_accessor = accessor
        return self

    def css(self, css_class: str) -> "Column":
        self.css_class = css_class
        return self

    def width(self, width: str) -> "Column":
        self.column_width = width
        return self

    def nowrap(self, value: bool = True) -> "Column":
        self.no_wrap = value
        return self

    def attributes(self, **attributes: Any) -> "Column":
        self.component_attributes.update(attributes)
        return self

    def hidden(self, flag: Visibility = True) -> "Column":
        """Hide the column; a callable receives the current user."""
        if callable(flag):
            self.visibility = lambda user: not flag(user)
        else:
            self.visibility = not flag
        return self

    # Introspection ---------------------------------------------------------

    @property
    def is_sortable(self) -> bool:
        return bool(self.sort_strategy)

    @property
    def has_custom_sort(self) -> bool:
        return callable(self.sort_strategy)

    @property
    def is_searchable(self) -> bool:
        return bool(self.search_strategy)

    @property
    def has_custom_search(self) -> bool:
        return callable(self.search_strategy)

    @property
    def is_relation(self) -> bool:
        return "." in self.key

    @property
    def lookup(self) -> str:
        return to_lookup(self.key)

    def is_visible(self, user: Any = None) -> bool:
        return evaluate_visibility(self.visibility, user)

    def to_view(self) -> Dict[str, Any]:
        render_type = getattr(self.render_type, "value", self.render_type)
        return {
            "key": self.key,
            "label": self.label,
            "render_type": render_type,
            "sortable": self.is_sortable,
            "searchable": self.is_searchable,
            "has_formatter": self.formatter is not None,
            "has_content": self.content_accessor is not None,
            "css_class": self.css_class,
            "width": self.column_width,
            "nowrap": self.no_wrap,
            "attributes": project_for_view(self.component_attributes),
        }

    def __repr__(self) -> str:
        return f"<Column key={self.key!r} type={self.render_type!r}>"
