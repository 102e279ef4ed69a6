"""
Host configuration contract.

A host declares a grid by subclassing ``DataGrid``: the entity key, the
queryset, the declarations (headers, filters, actions) and a few fallbacks
used by the query pipeline when the declarations are silent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Type, Union

from django.db import models
from django.db.models import QuerySet

from .constants import SORT_ASC
from .dsl.actions import BulkAction, RowAction
from .dsl.base import to_lookup
from .dsl.definition import HeaderLike, TableDefinition
from .dsl.filters import Filter
from .exceptions import DefinitionError
from .settings import GridSettings


@dataclass
class SortableField:
    """A host-level sortable field with its own default direction."""

    key: str
    lookup: Optional[str] = None
    default_direction: str = SORT_ASC

    @property
    def order_lookup(self) -> str:
        return self.lookup or to_lookup(self.key)


class DataGrid:
    """
    Base class for grid declarations.

    Example:
        class MemberGrid(DataGrid):
            entity_key = "members"
            model = Member
            searchable_fields = ["email"]
            default_sort = ("name", "asc")

            def headers(self):
                return [Column.make("name").sortable().searchable()]
    """

    entity_key: Optional[str] = None
    model: Optional[Type[models.Model]] = None
    searchable_fields: Sequence[str] = ()
    filterable_fields: Union[Sequence[str], Mapping[str, Mapping[str, Any]]] = ()
    sortable_fields: Sequence[Union[str, SortableField]] = ()
    default_sort: Optional[Tuple[str, str]] = None
    default_per_page: Optional[int] = None
    row_click_action: Optional[str] = None

    def __init__(self, user: Any = None):
        if not self.entity_key:
            raise DefinitionError(f"{type(self).__name__} must define entity_key")
        self.user = user
        self._definition: Optional[TableDefinition] = None
        self._settings: Optional[GridSettings] = None

    # Declarations ----------------------------------------------------------

    def get_queryset(self) -> QuerySet:
        if self.model is None:
            raise DefinitionError(
                f"{type(self).__name__} must define model or override get_queryset()",
                entity_key=self.entity_key,
            )
        return self.model._default_manager.all()

    def headers(self) -> List[HeaderLike]:
        return []

    def filters(self) -> List[Filter]:
        return []

    def row_actions(self) -> List[RowAction]:
        return []

    def bulk_actions(self) -> List[BulkAction]:
        return []

    def row_click(self, row: Any) -> Optional[RowAction]:
        """Return the row action triggered by clicking ``row``, if any."""
        if not self.row_click_action:
            return None
        action = self.get_definition().get_row_action(self.row_click_action)
        if action is None or not action.is_visible_for(row):
            return None
        return action

    # Resolution ------------------------------------------------------------

    @property
    def settings(self) -> GridSettings:
        if self._settings is None:
            self._settings = GridSettings.from_entity(self.entity_key)
        return self._settings

    def get_definition(self) -> TableDefinition:
        """Compile the declarations for the current user, once per instance."""
        if self._definition is None:
            filters = list(self.filters())
            declared = {f.key for f in filters}
            filters.extend(
                item for item in self.get_filterable_filters() if item.key not in declared
            )
            self._definition = TableDefinition.compile(
                self.headers(),
                self.row_actions(),
                self.bulk_actions(),
                filters,
                user=self.user,
                default_sort=self.default_sort,
                default_per_page=self.default_per_page,
                entity_key=self.entity_key,
            )
        return self._definition

    def get_filterable_filters(self) -> List[Filter]:
        """
        Build filters from ``filterable_fields``.

        Bare names become plain select filters. A mapping of name to config
        goes through ``Filter.from_config``.
        """
        if isinstance(self.filterable_fields, Mapping):
            return [
                Filter.from_config(key, config or {})
                for key, config in self.filterable_fields.items()
            ]
        return [Filter.make(field_name) for field_name in self.filterable_fields]

    def get_sortable_field(self, key: str) -> Optional[SortableField]:
        for item in self.sortable_fields:
            field = item if isinstance(item, SortableField) else SortableField(item)
            if field.key == key:
                return field
        return None

    @property
    def sortable_keys(self) -> List[str]:
        return [
            item.key if isinstance(item, SortableField) else item
            for item in self.sortable_fields
        ]

    def get_page_size(self) -> int:
        return self.default_per_page or self.settings.default_per_page
