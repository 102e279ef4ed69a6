"""
Signal receivers for the preferences subsystem.
"""

import logging

from django.contrib.auth.signals import user_logged_in
from django.db import DatabaseError
from django.dispatch import receiver

from ..config_proxy import get_setting
from ..exceptions import PreferencesStoreError
from .user import sync_user_preferences_to_session

logger = logging.getLogger(__name__)


@receiver(user_logged_in, dispatch_uid="datagrid_sync_preferences_on_login")
def sync_grid_preferences_on_login(sender, request, user, **kwargs):
    """Hydrate the session with the stored grid preferences of ``user``."""
    if not get_setting("preferences_settings.sync_on_login", True):
        return
    if request is None or not hasattr(request, "session"):
        return
    namespace = get_setting("preferences_settings.session_namespace", "datagrid")
    try:
        sync_user_preferences_to_session(request.session, user, namespace)
    except (PreferencesStoreError, DatabaseError) as exc:
        logger.warning(f"Could not sync grid preferences on login: {exc}")
