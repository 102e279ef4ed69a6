"""
Filtering pipeline step.

Applies only declared filters. Empty and ``"all"`` values are skipped;
unknown keys and values the field cannot accept are ignored.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional, Type

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q, QuerySet
from django.utils.dateparse import parse_date, parse_datetime

from ...constants import (
    BOOLEAN_TRUE_VALUES,
    FILTER_ALL,
    FILTER_NOT,
    FILTER_NOT_NULL,
    FILTER_NULL,
    FilterType,
)
from ...dsl.base import to_lookup
from ...dsl.filters import Filter
from ..base import QueryStep
from ..context import GridQueryContext
from ..utils import get_field_from_path, relation_safe_q

logger = logging.getLogger(__name__)


def is_empty_filter_value(value: Any) -> bool:
    if value is None or value == "" or value == FILTER_ALL:
        return True
    if isinstance(value, (list, tuple, set)):
        return all(is_empty_filter_value(item) for item in value)
    if isinstance(value, dict):
        if FILTER_NOT in value:
            return is_empty_filter_value(value[FILTER_NOT])
        return all(is_empty_filter_value(item) for item in value.values())
    return False


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value)
    try:
        parsed = parse_date(text)
        if parsed is None:
            parsed_dt = parse_datetime(text)
            parsed = parsed_dt.date() if parsed_dt else None
    except ValueError:
        logger.debug(f"Ignoring impossible date bound '{text}'")
        return None
    return parsed


class FilterStep(QueryStep):
    order = 20
    name = "filtering"

    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        for key, raw_value in (ctx.state.filters or {}).items():
            definition = ctx.definition.get_filter(key)
            if definition is None:
                logger.debug(f"Ignoring undeclared filter '{key}' on grid '{ctx.entity_key}'")
                continue
            if is_empty_filter_value(raw_value):
                continue
            try:
                queryset = self.apply_filter(queryset, definition, raw_value)
            except (ValueError, TypeError, ValidationError) as exc:
                logger.warning(
                    f"Skipping filter '{key}' on grid '{ctx.entity_key}': {exc}",
                    extra={"filter_key": key, "entity_key": ctx.entity_key},
                )
                continue
            ctx.applied_filters.append(key)
        return queryset

    def apply_filter(self, queryset: QuerySet, definition: Filter, raw_value: Any) -> QuerySet:
        if definition.has_custom_execute:
            return definition.execute_strategy(queryset, raw_value, definition.key)

        value = definition.map_value(raw_value)
        filter_type = definition.type_value

        if filter_type == FilterType.DATE_RANGE.value:
            return self._apply_date_range(queryset, definition, value)

        if filter_type == FilterType.BOOLEAN.value and value not in (FILTER_NULL, FILTER_NOT_NULL):
            value = self._coerce_boolean(value)
        elif filter_type == FilterType.MULTISELECT.value and not isinstance(
            value, (list, tuple, dict)
        ):
            value = [value]

        if definition.relation_name:
            lookup = f"{to_lookup(definition.relation_name)}__{definition.relation_column}"
            condition = self.build_condition(queryset.model, lookup, value, force_subquery=True)
        else:
            condition = self.build_condition(queryset.model, definition.target_field, value)
        return queryset.filter(condition)

    def build_condition(
        self,
        model: Type[models.Model],
        lookup: str,
        value: Any,
        force_subquery: bool = False,
    ) -> Q:
        negate = False
        if value == FILTER_NULL:
            condition = Q(**{f"{lookup}__isnull": True})
        elif value == FILTER_NOT_NULL:
            condition = Q(**{f"{lookup}__isnull": False})
        elif isinstance(value, dict) and FILTER_NOT in value:
            excluded = value[FILTER_NOT]
            if not isinstance(excluded, (list, tuple)):
                excluded = [excluded]
            condition = Q(**{f"{lookup}__in": list(excluded)})
            negate = True
        elif isinstance(value, (list, tuple, set)):
            values = [item for item in value if not is_empty_filter_value(item)]
            condition = Q(**{f"{lookup}__in": values})
        else:
            condition = Q(**{lookup: value})

        if force_subquery:
            condition = Q(pk__in=model._default_manager.filter(condition).values("pk"))
        else:
            condition = relation_safe_q(model, condition, lookup)
        return ~condition if negate else condition

    def _coerce_boolean(self, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in BOOLEAN_TRUE_VALUES
        return value in BOOLEAN_TRUE_VALUES

    def _apply_date_range(self, queryset: QuerySet, definition: Filter, value: Any) -> QuerySet:
        if not isinstance(value, dict):
            logger.warning(
                f"Date range filter '{definition.key}' expects a mapping, got {type(value).__name__}",
                extra={"filter_key": definition.key},
            )
            return queryset

        lookup = definition.target_field
        field = get_field_from_path(queryset.model, lookup)
        prefix = f"{lookup}__date" if isinstance(field, models.DateTimeField) else lookup

        start = _parse_date(value.get("from"))
        end = _parse_date(value.get("to"))
        conditions = Q()
        if start is not None:
            conditions &= Q(**{f"{prefix}__gte": start})
        if end is not None:
            conditions &= Q(**{f"{prefix}__lte": end})
        if not conditions:
            return queryset
        return queryset.filter(relation_safe_q(queryset.model, conditions, lookup))
