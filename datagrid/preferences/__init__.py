"""
Per-grid view preferences: stores, service and state reconciliation.
"""

from .base import PreferencesStore
from .reconciliation import QueryParamParser, ReconciledState, StateReconciler
from .service import GridPreferencesService, resolve_preferences_store
from .session import SessionPreferencesStore
from .user import (
    SessionCachedPreferencesStore,
    UserPreferencesStore,
    sync_user_preferences_to_session,
)

__all__ = [
    "GridPreferencesService",
    "PreferencesStore",
    "QueryParamParser",
    "ReconciledState",
    "SessionCachedPreferencesStore",
    "SessionPreferencesStore",
    "StateReconciler",
    "UserPreferencesStore",
    "resolve_preferences_store",
    "sync_user_preferences_to_session",
]
