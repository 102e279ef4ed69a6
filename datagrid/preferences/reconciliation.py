"""
Initial state reconciliation.

Combines submitted query parameters, saved preferences and grid defaults
into the state a grid mounts with. Each field falls back independently:
query parameter, then saved preference, then default. When any recognized
parameter was submitted, the merged bag is persisted and the caller is told
to clean the URL. Recognized parameters whose values are all invalid are
not persisted, but the URL is still cleaned.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Set

from ..constants import (
    PARAM_DIRECTION,
    PARAM_FILTERS,
    PARAM_PAGE,
    PARAM_PER_PAGE,
    PARAM_SEARCH,
    PARAM_SORT,
    SORT_DIRECTIONS,
)
from ..state import GridState
from .service import GridPreferencesService

logger = logging.getLogger(__name__)

_FILTER_KEY = re.compile(r"^filters\[([^\]]+)\](?:\[([^\]]*)\])?$")


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


@dataclass
class ReconciledState:
    state: GridState
    from_query: bool = False
    clean_url: bool = False
    query_fields: Set[str] = field(default_factory=set)


class QueryParamParser:
    """
    Extract recognized grid parameters from a query mapping.

    Accepts plain dicts and Django ``QueryDict`` objects. Filters are read
    from a nested ``filters`` mapping or from flattened
    ``filters[key]``, ``filters[key][]`` and ``filters[key][sub]`` keys.
    With an alias, every key is prefixed by ``<alias>_``.
    """

    def __init__(self, alias: Optional[str] = None):
        self.alias = alias

    def _name(self, name: str) -> str:
        return f"{self.alias}_{name}" if self.alias else name

    def _strip(self, key: str) -> Optional[str]:
        if not self.alias:
            return key
        prefix = f"{self.alias}_"
        return key[len(prefix):] if key.startswith(prefix) else None

    def _getlist(self, params: Mapping, key: str) -> list:
        if hasattr(params, "getlist"):
            return params.getlist(key)
        value = params.get(key)
        if value is None:
            return []
        return list(value) if isinstance(value, (list, tuple)) else [value]

    def parse(self, params: Optional[Mapping]) -> Dict[str, Any]:
        parsed: Dict[str, Any] = {}
        if not params:
            return parsed

        search = params.get(self._name(PARAM_SEARCH))
        if search is not None:
            parsed[PARAM_SEARCH] = str(search)

        sort = params.get(self._name(PARAM_SORT))
        if sort:
            parsed[PARAM_SORT] = str(sort)

        direction = str(params.get(self._name(PARAM_DIRECTION)) or "").lower()
        if direction in SORT_DIRECTIONS:
            parsed[PARAM_DIRECTION] = direction

        per_page = _positive_int(params.get(self._name(PARAM_PER_PAGE)))
        if per_page is not None:
            parsed[PARAM_PER_PAGE] = per_page

        page = _positive_int(params.get(self._name(PARAM_PAGE)))
        if page is not None:
            parsed[PARAM_PAGE] = page

        filters = self._parse_filters(params)
        if filters is not None:
            parsed[PARAM_FILTERS] = filters
        return parsed

    def present(self, params: Optional[Mapping]) -> Set[str]:
        """Recognized parameter names found in ``params``, valid or not."""
        names: Set[str] = set()
        if not params:
            return names
        scalars = (PARAM_SEARCH, PARAM_SORT, PARAM_DIRECTION, PARAM_PER_PAGE, PARAM_PAGE)
        for raw_key in list(params.keys()):
            key = self._strip(raw_key)
            if key is None:
                continue
            if key in scalars:
                names.add(key)
            elif key == PARAM_FILTERS or _FILTER_KEY.match(key):
                names.add(PARAM_FILTERS)
        return names

    def _parse_filters(self, params: Mapping) -> Optional[Dict[str, Any]]:
        nested = params.get(self._name(PARAM_FILTERS))
        if isinstance(nested, Mapping):
            return dict(nested)

        filters: Dict[str, Any] = {}
        found = False
        for raw_key in list(params.keys()):
            key = self._strip(raw_key)
            match = _FILTER_KEY.match(key) if key else None
            if not match:
                continue
            found = True
            name, sub_key = match.group(1), match.group(2)
            values = self._getlist(params, raw_key)
            if sub_key is None:
                filters[name] = values[-1] if values else ""
            elif sub_key == "":
                filters.setdefault(name, [])
                filters[name].extend(values)
            else:
                bucket = filters.setdefault(name, {})
                if isinstance(bucket, dict):
                    bucket[sub_key] = values[-1] if values else ""
        return filters if found else None


class StateReconciler:
    def __init__(
        self,
        service: GridPreferencesService,
        defaults: GridState,
        alias: Optional[str] = None,
    ):
        self.service = service
        self.defaults = defaults
        self.parser = QueryParamParser(alias)

    def reconcile(self, params: Optional[Mapping] = None) -> ReconciledState:
        submitted = self.parser.parse(params)
        saved = self.service.load()
        state = self.defaults.copy()
        preferred = GridState.from_preferences(saved)

        if saved:
            if "search" in saved:
                state.search = preferred.search
            if saved.get("sortBy"):
                state.sort_by = preferred.sort_by
                state.sort_direction = preferred.sort_direction
            if preferred.per_page:
                state.per_page = preferred.per_page
            if "filters" in saved:
                state.filters = preferred.filters

        if not submitted:
            present = self.parser.present(params)
            if present:
                logger.debug(
                    f"Grid '{self.service.entity_key}' ignored invalid query parameters: "
                    f"{sorted(present)}"
                )
                return ReconciledState(state=state, clean_url=True, query_fields=present)
            return ReconciledState(state=state)

        if PARAM_SEARCH in submitted:
            state.search = submitted[PARAM_SEARCH]
        if PARAM_SORT in submitted:
            state.sort_by = submitted[PARAM_SORT]
        if PARAM_DIRECTION in submitted:
            state.sort_direction = submitted[PARAM_DIRECTION]
        if PARAM_PER_PAGE in submitted:
            state.per_page = submitted[PARAM_PER_PAGE]
        if PARAM_PAGE in submitted:
            state.page = submitted[PARAM_PAGE]
        if PARAM_FILTERS in submitted:
            state.filters = submitted[PARAM_FILTERS]

        self.service.save(state.to_preferences())
        logger.debug(
            f"Grid '{self.service.entity_key}' state taken from query parameters: "
            f"{sorted(submitted)}"
        )
        return ReconciledState(
            state=state,
            from_query=True,
            clean_url=True,
            query_fields=set(submitted) | self.parser.present(params),
        )
