"""
Django app configuration for django-datagrid.

This module configures:
- Preference signal receivers (session sync on login)
- Extra render-type components declared in settings
- Library settings validation
"""

import logging

from django.apps import AppConfig as BaseAppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class DataGridConfig(BaseAppConfig):
    """Django app configuration for django-datagrid."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "datagrid"
    verbose_name = "Data grids"
    label = "datagrid"

    def ready(self):
        """Initialize the application after Django has loaded."""
        try:
            self._setup_signals()
            self._register_extra_components()
            self._validate_configuration()
            logger.info("django-datagrid initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing django-datagrid: {e}")
            if getattr(settings, "DEBUG", False):
                raise

    def _setup_signals(self):
        from .preferences import signals  # noqa: F401

    def _register_extra_components(self):
        from .config_proxy import get_setting
        from .rendering.registry import cell_registry, filter_registry

        for key, registry in (
            ("rendering_settings.extra_cell_components", cell_registry),
            ("rendering_settings.extra_filter_components", filter_registry),
        ):
            for render_type, component in (get_setting(key, {}) or {}).items():
                if not registry.has_component(render_type):
                    registry.register(render_type, component)

    def _validate_configuration(self):
        from .config_proxy import get_setting

        default_per_page = get_setting("query_settings.default_per_page", 15)
        max_per_page = get_setting("query_settings.max_per_page", 200)
        if default_per_page > max_per_page:
            logger.warning(
                f"DATAGRID default_per_page ({default_per_page}) exceeds "
                f"max_per_page ({max_per_page}); pages will be capped"
            )
