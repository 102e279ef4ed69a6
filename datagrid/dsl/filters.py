"""
Filter declarations.

Filters are keyed; only declared keys are ever applied to a query. Options
are either a static mapping or a deferred provider that is resolved once
per filter instance.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from django.db.models import QuerySet

from ..constants import FilterType
from ..exceptions import DefinitionError
from .base import Visibility, evaluate_visibility, humanize, to_lookup

logger = logging.getLogger(__name__)

FilterStrategy = Callable[[QuerySet, Any, str], QuerySet]
OptionsProvider = Callable[[], Mapping[Any, Any]]

FILTER_CONFIG_KEYS = frozenset(
    {
        "type",
        "label",
        "options",
        "relationship",
        "value_mapping",
        "field_mapping",
        "placeholder",
        "depends_on",
    }
)


class Filter:
    """
    Fluent filter builder.

    Example:
        Filter.make("status").options({"active": "Active", "archived": "Archived"})
        Filter.make("has_email").boolean().map_values({"1": "not_null", "0": "null"})
        Filter.make("team", "Team").relationship("team", "id").options(load_teams)
        Filter.make("created_at").date_range()
    """

    def __init__(self, key: str, label: Optional[str] = None):
        self.key = key
        self.label = label if label is not None else humanize(key)
        self.filter_type: Any = FilterType.SELECT
        self.static_options: Optional[Mapping[Any, Any]] = None
        self.options_provider: Optional[OptionsProvider] = None
        self.value_mapping: Dict[str, Any] = {}
        self.field_mapping: Optional[str] = None
        self.relation_name: Optional[str] = None
        self.relation_column: Optional[str] = None
        self.parent_key: Optional[str] = None
        self.placeholder_text: Optional[str] = None
        self.execute_strategy: Optional[FilterStrategy] = None
        self.visibility: Visibility = True
        self._resolved_options: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def make(cls, key: str, label: Optional[str] = None) -> "Filter":
        return cls(key, label)

    @classmethod
    def from_config(cls, key: str, config: Mapping[str, Any]) -> "Filter":
        """
        Build a filter from a host config entry.

        Example:
            Filter.from_config("has_email", {
                "type": "boolean",
                "field_mapping": "email",
                "value_mapping": {"1": "not_null", "0": "null"},
            })

        ``relationship`` is a relation name, a ``(name, column)`` pair or a
        mapping with ``name`` and ``column``.

        Raises:
            DefinitionError: On an unknown config key or relationship shape.
        """
        unknown = set(config) - FILTER_CONFIG_KEYS
        if unknown:
            raise DefinitionError(
                f"Unknown filter config keys {sorted(unknown)} on '{key}'",
                item_key=key,
            )
        item = cls(key, config.get("label"))
        if config.get("options") is not None:
            item.options(config["options"])
        relationship = config.get("relationship")
        if relationship:
            if isinstance(relationship, str):
                item.relationship(relationship)
            elif isinstance(relationship, Mapping) and "name" in relationship:
                item.relationship(relationship["name"], relationship.get("column", "pk"))
            elif isinstance(relationship, (list, tuple)) and len(relationship) == 2:
                item.relationship(*relationship)
            else:
                raise DefinitionError(
                    f"Invalid relationship config on '{key}'", item_key=key
                )
        if config.get("value_mapping"):
            item.map_values(config["value_mapping"])
        if config.get("field_mapping"):
            item.field(config["field_mapping"])
        if config.get("placeholder"):
            item.placeholder(config["placeholder"])
        if config.get("depends_on"):
            item.depends_on(config["depends_on"])
        if config.get("type"):
            item.of_type(config["type"])
        return item

    # Builder methods -------------------------------------------------------

    def of_type(self, filter_type: Any) -> "Filter":
        self.filter_type = filter_type
        return self

    def select(self) -> "Filter":
        return self.of_type(FilterType.SELECT)

    def multiselect(self) -> "Filter":
        return self.of_type(FilterType.MULTISELECT)

    def boolean(self) -> "Filter":
        return self.of_type(FilterType.BOOLEAN)

    def date_range(self) -> "Filter":
        return self.of_type(FilterType.DATE_RANGE)

    def relationship(self, name: str, column: str = "pk") -> "Filter":
        """Match rows having a related ``name`` whose ``column`` equals the value."""
        self.relation_name = name
        self.relation_column = column
        self.filter_type = FilterType.RELATIONSHIP
        return self

    def options(self, options: Union[Mapping[Any, Any], OptionsProvider]) -> "Filter":
        if callable(options):
            self.options_provider = options
            self.static_options = None
        else:
            self.static_options = options
            self.options_provider = None
        self._resolved_options = None
        return self

    def map_values(self, mapping: Mapping[str, Any]) -> "Filter":
        """Translate submitted values before they reach the query."""
        self.value_mapping = dict(mapping)
        return self

    def field(self, field_name: str) -> "Filter":
        """Compare against ``field_name`` instead of the filter key."""
        self.field_mapping = field_name
        return self

    def depends_on(self, parent_key: str) -> "Filter":
        self.parent_key = parent_key
        return self

    def placeholder(self, text: str) -> "Filter":
        self.placeholder_text = text
        return self

    def using(self, strategy: FilterStrategy) -> "Filter":
        """Replace the built-in behaviour with ``callable(queryset, value, key)``."""
        self.execute_strategy = strategy
        return self

    def show(self, flag: Visibility = True) -> "Filter":
        self.visibility = flag
        return self

    # Runtime helpers -------------------------------------------------------

    @property
    def type_value(self) -> str:
        return getattr(self.filter_type, "value", self.filter_type)

    @property
    def target_field(self) -> str:
        return to_lookup(self.field_mapping or self.key)

    @property
    def has_custom_execute(self) -> bool:
        return self.execute_strategy is not None

    def is_visible(self, user: Any = None) -> bool:
        return evaluate_visibility(self.visibility, user)

    def map_value(self, value: Any) -> Any:
        if not self.value_mapping:
            return value
        if isinstance(value, (list, tuple)):
            return [self.value_mapping.get(str(item), item) for item in value]
        if isinstance(value, (dict, bool)) or value is None:
            return value
        return self.value_mapping.get(str(value), value)

    def get_options(self) -> List[Dict[str, Any]]:
        """
        Return ``[{"value", "label"}]`` options, prefixed by an empty option.

        Provider failures degrade to the empty option only.
        """
        if self._resolved_options is not None:
            return self._resolved_options

        options: List[Dict[str, Any]] = [
            {"value": "", "label": self.placeholder_text or ""}
        ]
        source: Optional[Mapping[Any, Any]] = self.static_options
        if self.options_provider is not None:
            try:
                source = self.options_provider()
            except Exception as exc:
                logger.warning(
                    f"Options provider for filter '{self.key}' failed: {exc}",
                    extra={"filter_key": self.key},
                )
                source = None

        for value, label in (source or {}).items():
            options.append({"value": value, "label": label})

        self._resolved_options = options
        return options

    def label_for(self, value: Any) -> str:
        for option in self.get_options():
            if option["value"] != "" and str(option["value"]) == str(value):
                return str(option["label"])
        return str(value)

    def to_view(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "type": self.type_value,
            "options": self.get_options(),
            "depends_on": self.parent_key,
            "placeholder": self.placeholder_text,
            "is_relationship": self.relation_name is not None,
            "has_execute": self.has_custom_execute,
        }

    def __repr__(self) -> str:
        return f"<Filter key={self.key!r} type={self.type_value!r}>"
