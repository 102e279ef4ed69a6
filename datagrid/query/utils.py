"""
ORM helpers for relation-aware lookups.
"""

from typing import Optional, Type

from django.db import models
from django.db.models import Q


def get_field_from_path(
    model: Type[models.Model], lookup: str
) -> Optional[models.Field]:
    """
    Get Django field from a lookup path (e.g. 'team__owner__email').

    Trailing lookup names that are not fields (``icontains``, ``date``) are
    ignored. Returns None when the path does not resolve.
    """
    current_model = model
    field = None
    for part in lookup.split("__"):
        if part == "pk":
            field = current_model._meta.pk
            continue
        try:
            field = current_model._meta.get_field(part)
        except Exception:
            return field
        if getattr(field, "is_relation", False) and field.related_model is not None:
            current_model = field.related_model
    return field


def crosses_relation(model: Type[models.Model], lookup: str) -> bool:
    """Return True when ``lookup`` traverses a relation before its last field."""
    current_model = model
    parts = lookup.split("__")
    for index, part in enumerate(parts):
        try:
            field = current_model._meta.get_field(part)
        except Exception:
            return False
        if not getattr(field, "is_relation", False) or field.related_model is None:
            return False
        if index < len(parts) - 1:
            return True
        current_model = field.related_model
    return False


def relation_safe_q(model: Type[models.Model], condition: Q, lookup: str) -> Q:
    """
    Wrap ``condition`` in a ``pk__in`` subquery when ``lookup`` crosses a
    relation, so the outer query never gains duplicate rows from a join.
    """
    if not crosses_relation(model, lookup):
        return condition
    return Q(pk__in=model._default_manager.filter(condition).values("pk"))
