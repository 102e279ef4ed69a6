"""
Persistent per-user grid preferences.
"""

from django.conf import settings
from django.db import models


class UserGridPreferences(models.Model):
    """
    One JSON document per user holding a preference bag per grid.

    The document maps ``"<namespace>.<entity_key>"`` to
    ``{search, sortBy, sortDirection, perPage, filters}``. Rows are created
    lazily on first write.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="grid_preferences",
    )
    preferences = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "datagrid"
        verbose_name = "User grid preferences"
        verbose_name_plural = "User grid preferences"

    def __str__(self) -> str:
        return f"Grid preferences for {self.user}"
