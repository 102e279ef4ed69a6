"""
Shared constants for django-datagrid.
"""

from enum import Enum


class ColumnRenderType(str, Enum):
    TEXT = "text"
    BADGE = "badge"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    CURRENCY = "currency"
    NUMBER = "number"
    LINK = "link"
    AVATAR = "avatar"
    SAFE_HTML = "safe_html"


class FilterType(str, Enum):
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    DATE_RANGE = "date_range"
    RELATIONSHIP = "relationship"


SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

# Sentinel filter values
FILTER_ALL = "all"
FILTER_NULL = "null"
FILTER_NOT_NULL = "not_null"
FILTER_NOT = "not"
BOOLEAN_TRUE_VALUES = ("true", "1", True, 1)

# Recognized state parameters
PARAM_SEARCH = "search"
PARAM_SORT = "sort"
PARAM_DIRECTION = "direction"
PARAM_PER_PAGE = "per_page"
PARAM_PAGE = "page"
PARAM_FILTERS = "filters"
STATE_PARAMS = (
    PARAM_SEARCH,
    PARAM_SORT,
    PARAM_DIRECTION,
    PARAM_PER_PAGE,
    PARAM_PAGE,
    PARAM_FILTERS,
)

# Preference bag keys
PREF_SEARCH = "search"
PREF_SORT_BY = "sortBy"
PREF_SORT_DIRECTION = "sortDirection"
PREF_PER_PAGE = "perPage"
PREF_FILTERS = "filters"
PREFERENCE_KEYS = (
    PREF_SEARCH,
    PREF_SORT_BY,
    PREF_SORT_DIRECTION,
    PREF_PER_PAGE,
    PREF_FILTERS,
)

# Default component identifiers
CELL_COMPONENTS = {
    ColumnRenderType.TEXT: "datagrid.cells.text",
    ColumnRenderType.BADGE: "datagrid.cells.badge",
    ColumnRenderType.BOOLEAN: "datagrid.cells.boolean",
    ColumnRenderType.DATE: "datagrid.cells.date",
    ColumnRenderType.DATETIME: "datagrid.cells.datetime",
    ColumnRenderType.CURRENCY: "datagrid.cells.currency",
    ColumnRenderType.NUMBER: "datagrid.cells.number",
    ColumnRenderType.LINK: "datagrid.cells.link",
    ColumnRenderType.AVATAR: "datagrid.cells.avatar",
    ColumnRenderType.SAFE_HTML: "datagrid.cells.safe-html",
}

FILTER_COMPONENTS = {
    FilterType.SELECT: "datagrid.filters.select",
    FilterType.MULTISELECT: "datagrid.filters.multiselect",
    FilterType.BOOLEAN: "datagrid.filters.boolean",
    FilterType.DATE_RANGE: "datagrid.filters.date-range",
    FilterType.RELATIONSHIP: "datagrid.filters.relationship",
}

# Viewport breakpoints used by header visibility classes
VIEWPORTS = ("sm", "md", "lg", "xl", "2xl")
