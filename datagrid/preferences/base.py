"""
Preference store contract.

Stores hold one preference bag per grid entity. Concrete stores implement
``read_bag``/``write_bag``; the mapping-style API is shared.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


def storage_key(namespace: str, entity_key: str) -> str:
    return f"{namespace}.{entity_key}"


class PreferencesStore(ABC):
    name = "base"

    def __init__(self, namespace: str = "datagrid"):
        self.namespace = namespace

    def key_for(self, entity_key: str) -> str:
        return storage_key(self.namespace, entity_key)

    @abstractmethod
    def read_bag(self, entity_key: str) -> Optional[Dict[str, Any]]:
        """Return the stored bag, or None when nothing is stored."""

    @abstractmethod
    def write_bag(self, entity_key: str, bag: Optional[Dict[str, Any]]) -> None:
        """Replace the stored bag; None removes it."""

    def all(self, entity_key: str) -> Dict[str, Any]:
        return dict(self.read_bag(entity_key) or {})

    def get(self, entity_key: str, key: str, default: Any = None) -> Any:
        return self.all(entity_key).get(key, default)

    def has(self, entity_key: str, key: str) -> bool:
        return key in self.all(entity_key)

    def set(self, entity_key: str, key: str, value: Any) -> None:
        self.set_many(entity_key, {key: value})

    def set_many(self, entity_key: str, values: Dict[str, Any]) -> None:
        bag = self.all(entity_key)
        bag.update(values)
        self.write_bag(entity_key, bag)

    def forget(self, entity_key: str, key: str) -> None:
        bag = self.all(entity_key)
        if key in bag:
            del bag[key]
            self.write_bag(entity_key, bag)

    def clear(self, entity_key: str) -> None:
        self.write_bag(entity_key, None)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} namespace={self.namespace!r}>"
