"""
Durable per-user preference store backed by ``UserGridPreferences``.
"""

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction

from ..exceptions import PreferencesStoreError
from ..models import UserGridPreferences
from .base import PreferencesStore
from .session import SessionPreferencesStore

logger = logging.getLogger(__name__)


class UserPreferencesStore(PreferencesStore):
    name = "user"

    def __init__(self, user, namespace: str = "datagrid"):
        super().__init__(namespace)
        self.user = user

    def document(self) -> Dict[str, Any]:
        """Return the whole preference document of the user."""
        try:
            document = (
                UserGridPreferences.objects.filter(user=self.user)
                .values_list("preferences", flat=True)
                .first()
            )
        except DatabaseError as exc:
            raise PreferencesStoreError(
                f"Could not read grid preferences for user {self.user.pk}: {exc}",
                store_name=self.name,
            ) from exc
        return dict(document or {})

    def read_bag(self, entity_key: str) -> Optional[Dict[str, Any]]:
        bag = self.document().get(self.key_for(entity_key))
        return dict(bag) if isinstance(bag, dict) else None

    def write_bag(self, entity_key: str, bag: Optional[Dict[str, Any]]) -> None:
        key = self.key_for(entity_key)
        try:
            with transaction.atomic():
                if bag is None:
                    record = (
                        UserGridPreferences.objects.select_for_update()
                        .filter(user=self.user)
                        .first()
                    )
                    if record is None:
                        return
                else:
                    record, _ = UserGridPreferences.objects.select_for_update().get_or_create(
                        user=self.user
                    )
                document = dict(record.preferences or {})
                if bag is None:
                    document.pop(key, None)
                else:
                    document[key] = bag
                record.preferences = document
                record.save(update_fields=["preferences", "updated_at"])
        except DatabaseError as exc:
            raise PreferencesStoreError(
                f"Could not write grid preferences for user {self.user.pk}: {exc}",
                entity_key=entity_key,
                store_name=self.name,
            ) from exc


class SessionCachedPreferencesStore(PreferencesStore):
    """
    Durable user store with the session as read cache.

    Reads hit the session and hydrate it from the database when the grid
    has no cached bag. Writes go to the database first, then the session.
    """

    name = "session_cached"

    def __init__(self, user_store: UserPreferencesStore, session_store: SessionPreferencesStore):
        super().__init__(user_store.namespace)
        self.user_store = user_store
        self.session_store = session_store

    def read_bag(self, entity_key: str) -> Optional[Dict[str, Any]]:
        if self.session_store.contains(entity_key):
            return self.session_store.read_bag(entity_key)
        bag = self.user_store.read_bag(entity_key)
        if bag is not None:
            self.session_store.write_bag(entity_key, bag)
        return bag

    def write_bag(self, entity_key: str, bag: Optional[Dict[str, Any]]) -> None:
        self.user_store.write_bag(entity_key, bag)
        self.session_store.write_bag(entity_key, bag)


def sync_user_preferences_to_session(session, user, namespace: str = "datagrid") -> int:
    """Copy every stored bag of ``user`` into ``session``; returns the count."""
    store = UserPreferencesStore(user, namespace)
    prefix = f"{namespace}."
    synced = 0
    for key, bag in store.document().items():
        if key.startswith(prefix) and isinstance(bag, dict):
            session[key] = bag
            synced += 1
    if synced:
        session.modified = True
    logger.debug(f"Synced {synced} grid preference bags to session for user {user.pk}")
    return synced
