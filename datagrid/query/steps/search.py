"""
Search pipeline step.

OR-combines case-insensitive containment over every searchable column, or
over the host's fallback ``searchable_fields`` when no column opts in.
"""

import logging
import operator
from functools import reduce
from typing import List, Optional

from django.db.models import Q, QuerySet

from ...dsl.base import to_lookup
from ..base import QueryStep
from ..context import GridQueryContext
from ..utils import relation_safe_q

logger = logging.getLogger(__name__)


class SearchStep(QueryStep):
    order = 10
    name = "search"

    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        term = (ctx.state.search or "").strip()
        if not term:
            return queryset
        condition = self.build_search_q(queryset.model, term, ctx)
        if condition is None:
            logger.debug(f"Grid '{ctx.entity_key}' has no searchable fields, search ignored")
            return queryset
        return queryset.filter(condition)

    def build_search_q(self, model, term: str, ctx: GridQueryContext) -> Optional[Q]:
        conditions: List[Q] = []
        columns = ctx.definition.searchable_columns
        if columns:
            for column in columns:
                if column.has_custom_search:
                    conditions.append(column.search_strategy(term))
                else:
                    conditions.append(self._contains(model, column.lookup, term))
        elif ctx.grid is not None:
            for field_path in ctx.grid.searchable_fields:
                conditions.append(self._contains(model, to_lookup(field_path), term))

        if not conditions:
            return None
        return reduce(operator.or_, conditions)

    def _contains(self, model, lookup: str, term: str) -> Q:
        return relation_safe_q(model, Q(**{f"{lookup}__icontains": term}), lookup)
