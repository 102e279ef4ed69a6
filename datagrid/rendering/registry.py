"""
Closed registries mapping render types to presentation components.

Only registered types can be rendered. Looking up an unknown type fails
fast, and a type can be registered at most once.
"""

import logging
import threading
from typing import Any, Dict, Mapping, Optional

from ..constants import CELL_COMPONENTS, FILTER_COMPONENTS
from ..exceptions import RenderTypeAlreadyRegisteredError, UnregisteredRenderTypeError

logger = logging.getLogger(__name__)


def _type_key(render_type: Any) -> str:
    return str(getattr(render_type, "value", render_type))


class ComponentRegistry:
    registry_name = "component"
    defaults: Mapping[Any, str] = {}

    def __init__(self, components: Optional[Mapping[Any, str]] = None):
        self._components: Dict[str, str] = {}
        self._lock = threading.Lock()
        for render_type, component in (components if components is not None else self.defaults).items():
            self.register(render_type, component)

    def register(self, render_type: Any, component: str) -> None:
        key = _type_key(render_type)
        with self._lock:
            if key in self._components:
                raise RenderTypeAlreadyRegisteredError(key, self.registry_name)
            self._components[key] = component
        logger.debug(f"Registered {self.registry_name} component '{component}' for '{key}'")

    def get_component(self, render_type: Any) -> str:
        component = self._components.get(_type_key(render_type))
        if component is None:
            raise UnregisteredRenderTypeError(_type_key(render_type), self.registry_name)
        return component

    def has_component(self, render_type: Any) -> bool:
        return _type_key(render_type) in self._components

    def all(self) -> Dict[str, str]:
        return dict(self._components)

    def __len__(self) -> int:
        return len(self._components)


class CellComponentRegistry(ComponentRegistry):
    registry_name = "cell"
    defaults = CELL_COMPONENTS


class FilterComponentRegistry(ComponentRegistry):
    registry_name = "filter"
    defaults = FILTER_COMPONENTS


cell_registry = CellComponentRegistry()
filter_registry = FilterComponentRegistry()
