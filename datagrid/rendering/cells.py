"""
Cell rendering.

A cell value is resolved from the row (custom accessor or dot-path
traversal), passed through the column formatter, then prepared for its
render type. ``safe_html`` values always go through the sanitizer.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.utils import dateformat, timezone

from ..constants import ColumnRenderType
from ..dsl.columns import Column
from ..security.sanitizer import HtmlSanitizer, get_sanitizer
from ..settings import GridSettings
from .registry import CellComponentRegistry, cell_registry

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class RenderedCell:
    key: str
    component: str
    render_type: str
    value: Any
    css_class: Optional[str] = None
    nowrap: bool = False
    attributes: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "component": self.component,
            "render_type": self.render_type,
            "value": self.value,
            "css_class": self.css_class,
            "nowrap": self.nowrap,
            "attributes": dict(self.attributes),
        }


def resolve_path(row: Any, path: str) -> Any:
    """
    Follow a dot-separated path on a model instance or mapping.

    Returns None when an intermediate value is None. Missing related rows
    raise ``ObjectDoesNotExist``.
    """
    current = row
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(part)
        else:
            current = getattr(current, part)
    if callable(current) and not hasattr(current, "all"):
        current = current()
    return current


class CellRenderer:
    def __init__(
        self,
        registry: Optional[CellComponentRegistry] = None,
        sanitizer: Optional[HtmlSanitizer] = None,
        settings: Optional[GridSettings] = None,
    ):
        self.registry = registry or cell_registry
        self.sanitizer = sanitizer or get_sanitizer()
        self.settings = settings or GridSettings.from_entity()

    def resolve_value(self, column: Column, row: Any) -> Any:
        if column.content_accessor is not None:
            value = column.content_accessor(row)
        else:
            try:
                value = resolve_path(row, column.key)
            except (ObjectDoesNotExist, AttributeError, KeyError) as exc:
                logger.warning(
                    f"Could not resolve '{column.key}' on {type(row).__name__}: {exc}",
                    extra={"column": column.key},
                )
                return _MISSING
        if column.formatter is not None:
            value = column.formatter(value, row)
        return value

    def render(self, column: Column, row: Any) -> RenderedCell:
        """
        Render one cell. Callable component attributes receive the raw value.

        Raises:
            UnregisteredRenderTypeError: If the column render type is unknown.
        """
        component = self.registry.get_component(column.render_type)
        render_type = str(getattr(column.render_type, "value", column.render_type))
        raw = self.resolve_value(column, row)
        if raw is _MISSING:
            raw = None
            value = self.settings.empty_placeholder
        else:
            value = self.prepare(render_type, raw)
        attributes = {
            name: attribute(raw) if callable(attribute) else attribute
            for name, attribute in column.component_attributes.items()
        }
        return RenderedCell(
            key=column.key,
            component=component,
            render_type=render_type,
            value=value,
            css_class=column.css_class,
            nowrap=column.no_wrap,
            attributes=attributes,
        )

    def render_row(self, columns: List[Column], row: Any) -> List[RenderedCell]:
        return [self.render(column, row) for column in columns]

    def prepare(self, render_type: str, value: Any) -> Any:
        if render_type == ColumnRenderType.SAFE_HTML.value:
            return self.sanitizer.sanitize(value)
        if value is None or value == "":
            if render_type == ColumnRenderType.BOOLEAN.value:
                return False
            return self.settings.empty_placeholder
        if render_type == ColumnRenderType.BOOLEAN.value:
            return bool(value)
        if render_type == ColumnRenderType.DATETIME.value and isinstance(value, datetime):
            if timezone.is_aware(value):
                value = timezone.localtime(value)
            return dateformat.format(value, self.settings.datetime_format)
        if render_type == ColumnRenderType.DATE.value and isinstance(value, date):
            return dateformat.format(value, self.settings.date_format)
        if render_type == ColumnRenderType.CURRENCY.value:
            return self._format_currency(value)
        if render_type == ColumnRenderType.NUMBER.value and isinstance(value, Decimal):
            return float(value)
        if isinstance(value, (str, int, float, bool, list, dict)):
            return value
        return str(value)

    def _format_currency(self, value: Any) -> str:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return str(value)
        decimals = self.settings.currency_decimals
        text = f"{amount:,.{decimals}f}"
        symbol = self.settings.currency_symbol
        return f"{symbol}{text}" if symbol else text
