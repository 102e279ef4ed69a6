"""
Typed settings for a single grid.

``GridSettings`` flattens the sections of ``LIBRARY_DEFAULTS`` that the
query pipeline, preference service and renderer consume, resolved through
``SettingsProxy`` for one entity key.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config_proxy import SettingsProxy


@dataclass
class GridSettings:
    """Resolved settings for one grid."""

    default_per_page: int = 15
    max_per_page: int = 200
    default_sort_direction: str = "asc"
    tiebreaker_field: str = "pk"
    query_param_alias: Optional[str] = None
    session_namespace: str = "datagrid"
    cache_user_preferences_in_session: bool = True
    sync_on_login: bool = True
    empty_placeholder: str = "-"
    incremental_window: int = 20
    date_format: str = "Y-m-d"
    datetime_format: str = "Y-m-d H:i"
    currency_symbol: str = ""
    currency_decimals: int = 2
    allowed_tags: List[str] = field(default_factory=list)
    allowed_attributes: Dict[str, List[str]] = field(default_factory=dict)
    allowed_protocols: List[str] = field(default_factory=list)
    allowed_css_properties: List[str] = field(default_factory=list)
    unsafe_url_placeholder: str = "#"

    _SECTIONS = (
        "query_settings",
        "preferences_settings",
        "rendering_settings",
        "security_settings",
    )

    @classmethod
    def from_entity(cls, entity_key: Optional[str] = None) -> "GridSettings":
        proxy = SettingsProxy(entity_key)
        valid_fields = set(cls.__dataclass_fields__.keys())
        values: dict[str, Any] = {}
        for section in cls._SECTIONS:
            section_values = proxy.section_defaults(section)
            for name in section_values:
                if name in valid_fields:
                    value = proxy.get(f"{section}.{name}")
                    if value is not None:
                        values[name] = value
        # Aliases are allowed to be unset, so they bypass the None filter.
        values["query_param_alias"] = proxy.get("query_settings.query_param_alias")
        return cls(**values)
