"""
Default configuration for the django-datagrid library.

Every setting consumed by the library has its default here. Host projects
override values globally through ``settings.DATAGRID`` or per grid through
``settings.DATAGRID_GRIDS[entity_key]``; see ``datagrid.config_proxy``.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "django-datagrid"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "query_settings": {
        "default_per_page": 15,
        "max_per_page": 200,
        "default_sort_direction": "asc",
        "tiebreaker_field": "pk",
        "query_param_alias": None,
    },
    "preferences_settings": {
        "session_namespace": "datagrid",
        "cache_user_preferences_in_session": True,
        "sync_on_login": True,
    },
    "rendering_settings": {
        "empty_placeholder": "-",
        "incremental_window": 20,
        "date_format": "Y-m-d",
        "datetime_format": "Y-m-d H:i",
        "currency_symbol": "",
        "currency_decimals": 2,
        "extra_cell_components": {},
        "extra_filter_components": {},
    },
    "security_settings": {
        "allowed_tags": [
            "p", "br", "strong", "em", "u", "s", "span", "div", "a",
            "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6",
            "table", "thead", "tbody", "tr", "th", "td",
            "blockquote", "code", "pre",
        ],
        "allowed_attributes": {
            "a": ["href", "title", "target"],
            "span": ["class", "style"],
            "div": ["class", "style"],
            "p": ["class", "style"],
            "table": ["class", "style"],
            "th": ["class", "style", "colspan", "rowspan"],
            "td": ["class", "style", "colspan", "rowspan"],
        },
        "allowed_protocols": ["http", "https", "mailto"],
        "allowed_css_properties": [
            "color", "background-color", "font-weight", "font-style",
            "text-align", "text-decoration", "width", "padding", "margin",
        ],
        "unsafe_url_placeholder": "#",
    },
}


# Grid-level keys a host may override in ``DATAGRID_GRIDS[entity_key]``
# without nesting them under a section.
GRID_SHORTCUT_KEYS = {
    "default_per_page": "query_settings.default_per_page",
    "max_per_page": "query_settings.max_per_page",
    "query_param_alias": "query_settings.query_param_alias",
}
