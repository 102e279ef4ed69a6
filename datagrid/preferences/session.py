"""
Session-backed preference store, used for guests and as a read cache.
"""

from typing import Any, Dict, Optional

from .base import PreferencesStore


class SessionPreferencesStore(PreferencesStore):
    name = "session"

    def __init__(self, session, namespace: str = "datagrid"):
        super().__init__(namespace)
        self.session = session

    def contains(self, entity_key: str) -> bool:
        return self.key_for(entity_key) in self.session

    def read_bag(self, entity_key: str) -> Optional[Dict[str, Any]]:
        bag = self.session.get(self.key_for(entity_key))
        return dict(bag) if isinstance(bag, dict) else None

    def write_bag(self, entity_key: str, bag: Optional[Dict[str, Any]]) -> None:
        key = self.key_for(entity_key)
        if bag is None:
            self.session.pop(key, None)
        else:
            self.session[key] = bag
        self.session.modified = True
