"""
Registry of grid classes keyed by entity key.
"""

import logging
import threading
from typing import Dict, List, Optional, Type

from .exceptions import DefinitionError, GridAlreadyRegisteredError, UnknownGridError
from .grids import DataGrid

logger = logging.getLogger(__name__)


class GridRegistry:
    """Thread-safe mapping of entity keys to ``DataGrid`` subclasses."""

    def __init__(self):
        self._grids: Dict[str, Type[DataGrid]] = {}
        self._lock = threading.Lock()

    def register(self, grid_class: Type[DataGrid]) -> Type[DataGrid]:
        entity_key = grid_class.entity_key
        if not entity_key:
            raise DefinitionError(f"{grid_class.__name__} must define entity_key")
        with self._lock:
            existing = self._grids.get(entity_key)
            if existing is not None and existing is not grid_class:
                raise GridAlreadyRegisteredError(entity_key)
            self._grids[entity_key] = grid_class
        logger.debug(f"Registered grid '{entity_key}' ({grid_class.__name__})")
        return grid_class

    def unregister(self, entity_key: str) -> None:
        with self._lock:
            self._grids.pop(entity_key, None)

    def get(self, entity_key: str) -> Type[DataGrid]:
        grid_class = self._grids.get(entity_key)
        if grid_class is None:
            raise UnknownGridError(entity_key)
        return grid_class

    def get_grid(self, entity_key: str, user=None) -> DataGrid:
        return self.get(entity_key)(user=user)

    def find(self, entity_key: str) -> Optional[Type[DataGrid]]:
        return self._grids.get(entity_key)

    def all(self) -> List[str]:
        return sorted(self._grids)

    def clear(self) -> None:
        with self._lock:
            self._grids.clear()


grid_registry = GridRegistry()


def register_grid(grid_class: Type[DataGrid]) -> Type[DataGrid]:
    """Class decorator registering a grid with the global registry."""
    return grid_registry.register(grid_class)
