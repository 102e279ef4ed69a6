"""
Sorting pipeline step.

The requested sort key must belong to the declared sortable set; anything
else falls back to the default sort. A tiebreaker is always appended so
pagination is stable.
"""

import logging
from typing import List, Optional, Tuple

from django.db.models import QuerySet

from ...constants import SORT_ASC, SORT_DESC
from ...dsl.base import to_lookup
from ...state import normalize_direction
from ..base import QueryStep
from ..context import GridQueryContext

logger = logging.getLogger(__name__)


class SortStep(QueryStep):
    order = 30
    name = "sorting"

    def allowed_keys(self, ctx: GridQueryContext) -> List[str]:
        keys = list(ctx.definition.sortable_keys)
        if ctx.grid is not None:
            keys.extend(k for k in ctx.grid.sortable_keys if k not in keys)
        return keys

    def resolve(self, ctx: GridQueryContext) -> Tuple[Optional[str], str]:
        """Return the effective ``(sort_key, direction)``."""
        default_direction = ctx.settings.default_sort_direction
        requested = ctx.state.sort_by
        if requested:
            if requested in self.allowed_keys(ctx):
                return requested, normalize_direction(ctx.state.sort_direction, default_direction)
            logger.debug(f"Ignoring non-sortable key '{requested}' on grid '{ctx.entity_key}'")

        default_sort = ctx.definition.default_sort
        if default_sort is None and ctx.grid is not None:
            default_sort = ctx.grid.default_sort
        if default_sort is not None:
            return default_sort[0], normalize_direction(default_sort[1], default_direction)
        return None, SORT_ASC

    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        sort_key, direction = self.resolve(ctx)
        tiebreaker = ctx.settings.tiebreaker_field
        ordering: List = []

        if sort_key is not None:
            column = ctx.definition.get_column(sort_key)
            if column is not None and column.has_custom_sort:
                queryset = column.sort_strategy(queryset, direction)
                ordering = list(queryset.query.order_by)
            else:
                lookup = self._lookup_for(sort_key, ctx)
                ordering = [f"-{lookup}" if direction == SORT_DESC else lookup]

        if tiebreaker not in ordering and f"-{tiebreaker}" not in ordering:
            ordering.append(tiebreaker)
        ctx.applied_ordering = [str(item) for item in ordering]
        return queryset.order_by(*ordering)

    def _lookup_for(self, sort_key: str, ctx: GridQueryContext) -> str:
        if ctx.grid is not None:
            field = ctx.grid.get_sortable_field(sort_key)
            if field is not None:
                return field.order_lookup
        return to_lookup(sort_key)
