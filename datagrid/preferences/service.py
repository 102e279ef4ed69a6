"""
Preference service.

Chooses the store for a request (session for guests, database with a
session cache for authenticated users) and keeps writes best effort: a
failing store is logged and never breaks the render.
"""

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError

from ..constants import PREFERENCE_KEYS
from ..exceptions import PreferencesStoreError
from ..settings import GridSettings
from .base import PreferencesStore
from .session import SessionPreferencesStore
from .user import SessionCachedPreferencesStore, UserPreferencesStore

logger = logging.getLogger(__name__)


def resolve_preferences_store(
    request, settings: Optional[GridSettings] = None
) -> PreferencesStore:
    settings = settings or GridSettings.from_entity()
    namespace = settings.session_namespace
    session_store = SessionPreferencesStore(request.session, namespace)
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        return session_store

    user_store = UserPreferencesStore(user, namespace)
    if settings.cache_user_preferences_in_session:
        return SessionCachedPreferencesStore(user_store, session_store)
    return user_store


def restrict_to_bag(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if key in PREFERENCE_KEYS}


class GridPreferencesService:
    """Reads and writes the preference bag of one grid."""

    def __init__(self, store: PreferencesStore, entity_key: str):
        self.store = store
        self.entity_key = entity_key

    @classmethod
    def for_request(
        cls, request, entity_key: str, settings: Optional[GridSettings] = None
    ) -> "GridPreferencesService":
        return cls(resolve_preferences_store(request, settings), entity_key)

    def load(self) -> Dict[str, Any]:
        try:
            return restrict_to_bag(self.store.all(self.entity_key))
        except (PreferencesStoreError, DatabaseError) as exc:
            logger.warning(
                f"Could not load preferences for grid '{self.entity_key}': {exc}",
                extra={"entity_key": self.entity_key, "store": self.store.name},
            )
            return {}

    def save(self, values: Dict[str, Any]) -> bool:
        """Merge ``values`` into the stored bag. Returns False on failure."""
        bag = restrict_to_bag(values)
        try:
            current = self.store.all(self.entity_key)
            if all(current.get(key) == value for key, value in bag.items()):
                return True
            self.store.set_many(self.entity_key, bag)
        except (PreferencesStoreError, DatabaseError):
            logger.exception(
                f"Could not save preferences for grid '{self.entity_key}'",
                extra={"entity_key": self.entity_key, "store": self.store.name},
            )
            return False
        return True

    def clear(self) -> bool:
        try:
            self.store.clear(self.entity_key)
        except (PreferencesStoreError, DatabaseError):
            logger.exception(
                f"Could not clear preferences for grid '{self.entity_key}'",
                extra={"entity_key": self.entity_key, "store": self.store.name},
            )
            return False
        return True
