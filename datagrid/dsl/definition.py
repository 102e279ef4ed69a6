"""
Table definition compiler.

``TableDefinition.compile`` evaluates every visibility flag and permission
gate against the current user once, drops what the user may not see and
returns an immutable aggregate. ``to_view_projection`` reduces it to plain
JSON-serializable data for the presentation layer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..constants import SORT_ASC, SORT_DIRECTIONS
from ..exceptions import DefinitionError
from ..rendering.registry import filter_registry
from .actions import BulkAction, RowAction
from .columns import Column
from .filters import Filter
from .headers import Header

logger = logging.getLogger(__name__)

HeaderLike = Union[Header, Column]


def _as_header(item: HeaderLike) -> Header:
    if isinstance(item, Header):
        return item
    if isinstance(item, Column):
        return Header.for_column(item)
    raise DefinitionError(f"Expected a Header or Column, got {type(item).__name__}")


def _check_unique(items: Iterable[Any], kind: str, entity_key: Optional[str]) -> None:
    seen = set()
    for item in items:
        if item.key in seen:
            raise DefinitionError(
                f"Duplicate {kind} key '{item.key}'",
                entity_key=entity_key,
                item_key=item.key,
            )
        seen.add(item.key)


class TableDefinition:
    """Compiled, per-request grid definition."""

    def __init__(
        self,
        headers: Sequence[Header],
        row_actions: Sequence[RowAction],
        bulk_actions: Sequence[BulkAction],
        filters: Sequence[Filter],
        default_sort: Optional[Tuple[str, str]] = None,
        default_per_page: Optional[int] = None,
        entity_key: Optional[str] = None,
    ):
        self.headers: Tuple[Header, ...] = tuple(headers)
        self.row_actions: Tuple[RowAction, ...] = tuple(row_actions)
        self.bulk_actions: Tuple[BulkAction, ...] = tuple(bulk_actions)
        self.filters: Tuple[Filter, ...] = tuple(filters)
        self.default_sort = default_sort
        self.default_per_page = default_per_page
        self.entity_key = entity_key

    @classmethod
    def compile(
        cls,
        headers: Iterable[HeaderLike] = (),
        row_actions: Iterable[RowAction] = (),
        bulk_actions: Iterable[BulkAction] = (),
        filters: Iterable[Filter] = (),
        *,
        user: Any = None,
        default_sort: Optional[Tuple[str, str]] = None,
        default_per_page: Optional[int] = None,
        entity_key: Optional[str] = None,
    ) -> "TableDefinition":
        """
        Compile declarations for ``user``.

        Visibility callables receive only the user. Actions carrying a
        permission gate are kept only if ``user.has_perm`` grants it.

        Raises:
            DefinitionError: On duplicate keys or an invalid default sort.
        """
        all_headers = [_as_header(item) for item in headers]
        row_actions = list(row_actions)
        bulk_actions = list(bulk_actions)
        filters = list(filters)

        _check_unique(all_headers, "header", entity_key)
        _check_unique(row_actions, "row action", entity_key)
        _check_unique(bulk_actions, "bulk action", entity_key)
        _check_unique(filters, "filter", entity_key)

        if default_sort is not None:
            sort_key, direction = default_sort
            if direction not in SORT_DIRECTIONS:
                raise DefinitionError(
                    f"Invalid default sort direction '{direction}'",
                    entity_key=entity_key,
                    item_key=sort_key,
                )

        visible_headers = [h for h in all_headers if h.is_visible(user)]
        visible_row_actions = [
            a for a in row_actions if a.is_visible(user) and a.is_permitted(user)
        ]
        visible_bulk_actions = [
            a for a in bulk_actions if a.is_visible(user) and a.is_permitted(user)
        ]
        visible_filters = [f for f in filters if f.is_visible(user)]

        logger.debug(
            f"Compiled grid '{entity_key}': {len(visible_headers)}/{len(all_headers)} headers, "
            f"{len(visible_row_actions)} row actions, {len(visible_bulk_actions)} bulk actions, "
            f"{len(visible_filters)} filters"
        )

        return cls(
            headers=visible_headers,
            row_actions=visible_row_actions,
            bulk_actions=visible_bulk_actions,
            filters=visible_filters,
            default_sort=default_sort,
            default_per_page=default_per_page,
            entity_key=entity_key,
        )

    # Lookups ---------------------------------------------------------------

    @property
    def columns(self) -> List[Column]:
        return [h.column for h in self.headers if h.column is not None]

    @property
    def searchable_columns(self) -> List[Column]:
        return [c for c in self.columns if c.is_searchable]

    @property
    def sortable_keys(self) -> List[str]:
        keys = [h.sort_key for h in self.headers if h.sort_key]
        for column in self.columns:
            if column.is_sortable and column.key not in keys:
                keys.append(column.key)
        return keys

    def get_column(self, key: str) -> Optional[Column]:
        return next((c for c in self.columns if c.key == key), None)

    def get_row_action(self, key: str) -> Optional[RowAction]:
        return next((a for a in self.row_actions if a.key == key), None)

    def get_bulk_action(self, key: str) -> Optional[BulkAction]:
        return next((a for a in self.bulk_actions if a.key == key), None)

    def get_filter(self, key: str) -> Optional[Filter]:
        return next((f for f in self.filters if f.key == key), None)

    @property
    def filter_keys(self) -> List[str]:
        return [f.key for f in self.filters]

    def row_actions_for(self, row: Any) -> List[RowAction]:
        return [a for a in self.row_actions if a.is_visible_for(row)]

    def to_view_projection(self) -> Dict[str, Any]:
        """
        Return JSON-serializable data; callables become boolean flags.

        Raises:
            UnregisteredRenderTypeError: If a filter type has no component.
        """
        default_sort = None
        if self.default_sort is not None:
            default_sort = {"key": self.default_sort[0], "direction": self.default_sort[1]}
        return {
            "entity": self.entity_key,
            "headers": [h.to_view() for h in self.headers],
            "row_actions": [a.to_view() for a in self.row_actions],
            "bulk_actions": [a.to_view() for a in self.bulk_actions],
            "filters": [
                {**f.to_view(), "component": filter_registry.get_component(f.type_value)}
                for f in self.filters
            ],
            "default_sort": default_sort,
            "default_per_page": self.default_per_page,
            "has_bulk_actions": bool(self.bulk_actions),
        }


class DefinitionBuilder:
    """
    Fluent aggregate of declarations.

    Example:
        definition = (
            DefinitionBuilder.make("members")
            .headers(Column.make("name").sortable().searchable())
            .actions(RowAction.make("edit").route(edit_url))
            .filters(Filter.make("status").options(STATUSES))
            .default_sort("name", "asc")
            .compile(request.user)
        )
    """

    def __init__(self, entity_key: Optional[str] = None):
        self.entity_key = entity_key
        self._headers: List[HeaderLike] = []
        self._row_actions: List[RowAction] = []
        self._bulk_actions: List[BulkAction] = []
        self._filters: List[Filter] = []
        self._default_sort: Optional[Tuple[str, str]] = None
        self._per_page: Optional[int] = None

    @classmethod
    def make(cls, entity_key: Optional[str] = None) -> "DefinitionBuilder":
        return cls(entity_key)

    def headers(self, *items: HeaderLike) -> "DefinitionBuilder":
        self._headers.extend(items)
        return self

    def actions(self, *items: RowAction) -> "DefinitionBuilder":
        self._row_actions.extend(items)
        return self

    def bulk_actions(self, *items: BulkAction) -> "DefinitionBuilder":
        self._bulk_actions.extend(items)
        return self

    def filters(self, *items: Filter) -> "DefinitionBuilder":
        self._filters.extend(items)
        return self

    def default_sort(self, key: str, direction: str = SORT_ASC) -> "DefinitionBuilder":
        self._default_sort = (key, direction)
        return self

    def per_page(self, value: int) -> "DefinitionBuilder":
        self._per_page = value
        return self

    def compile(self, user: Any = None) -> TableDefinition:
        return TableDefinition.compile(
            self._headers,
            self._row_actions,
            self._bulk_actions,
            self._filters,
            user=user,
            default_sort=self._default_sort,
            default_per_page=self._per_page,
            entity_key=self.entity_key,
        )
