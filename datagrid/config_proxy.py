"""
Layered settings lookup for django-datagrid.

A value is looked up per grid first, then in the project-wide ``DATAGRID``
setting, then in the library defaults.
"""

from typing import Any, Dict, Optional

from django.conf import settings

from .defaults import GRID_SHORTCUT_KEYS, LIBRARY_DEFAULTS


class SettingsProxy:
    """
    Read grid settings through three layers.

    Lookup order:
    1. ``DATAGRID_GRIDS[entity_key]`` (nested sections or flat shortcuts)
    2. ``DATAGRID``
    3. ``LIBRARY_DEFAULTS``

    Example:
        SettingsProxy("members").get("query_settings.max_per_page")
    """

    def __init__(self, entity_key: Optional[str] = None):
        """
        Args:
            entity_key: Grid whose ``DATAGRID_GRIDS`` entry is consulted first
        """
        self.entity_key = entity_key
        self._resolved: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Resolve ``key`` (``section.name``) and remember the answer.

        Args:
            key: Dotted path such as ``"preferences_settings.session_namespace"``
            default: Returned when no layer defines the key

        Returns:
            The first non-None value found, walking the layers in order
        """
        scope = self.entity_key or "*"
        memo_key = f"{scope}:{key}"
        if memo_key in self._resolved:
            return self._resolved[memo_key]

        value = default
        for layer in (self._from_grid, self._from_project, self._from_defaults):
            found = layer(key)
            if found is not None:
                value = found
                break

        self._resolved[memo_key] = value
        return value

    def _from_grid(self, key: str) -> Any:
        if not self.entity_key:
            return None

        grids = getattr(settings, "DATAGRID_GRIDS", {}) or {}
        overrides = grids.get(self.entity_key)
        if not isinstance(overrides, dict):
            return None

        found = self._dig(overrides, key)
        if found is not None:
            return found

        # {"default_per_page": 25} is accepted for "query_settings.default_per_page"
        for shortcut, full_key in GRID_SHORTCUT_KEYS.items():
            if full_key == key and shortcut in overrides:
                return overrides[shortcut]
        return None

    def _from_project(self, key: str) -> Any:
        return self._dig(getattr(settings, "DATAGRID", {}) or {}, key)

    def _from_defaults(self, key: str) -> Any:
        return self._dig(LIBRARY_DEFAULTS, key)

    def _dig(self, tree: Dict[str, Any], key: str) -> Any:
        """Follow ``key`` one dot segment at a time; None when a segment is absent."""
        node: Any = tree
        for segment in key.split("."):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    def section_defaults(self, section: str) -> Dict[str, Any]:
        """Library defaults of one section, used to enumerate its names."""
        values = self._from_defaults(section)
        return dict(values) if isinstance(values, dict) else {}

    def clear_cache(self) -> None:
        self._resolved.clear()


def get_settings_proxy(entity_key: Optional[str] = None) -> SettingsProxy:
    return SettingsProxy(entity_key)


def get_setting(key: str, default: Any = None, entity_key: Optional[str] = None) -> Any:
    """Shortcut for ``SettingsProxy(entity_key).get(key, default)``."""
    return get_settings_proxy(entity_key).get(key, default)
