"""
Custom exceptions for django-datagrid.

This module defines specific exception types for grid declaration,
rendering, registry and preference errors.
"""

from typing import Any, Optional


class DataGridError(Exception):
    """Base exception for data grid errors."""

    def __init__(self, message: str, entity_key: Optional[str] = None):
        self.entity_key = entity_key
        super().__init__(message)


class DefinitionError(DataGridError):
    """Raised when a grid declaration is malformed."""

    def __init__(
        self,
        message: str,
        entity_key: Optional[str] = None,
        item_key: Optional[str] = None,
    ):
        self.item_key = item_key
        super().__init__(message, entity_key)


class UnregisteredRenderTypeError(DataGridError):
    """Raised when a render type has no registered component."""

    def __init__(self, render_type: Any, registry_name: str = "component"):
        self.render_type = render_type
        self.registry_name = registry_name
        super().__init__(
            f"No {registry_name} component registered for type '{render_type}'"
        )


class RenderTypeAlreadyRegisteredError(DataGridError):
    """Raised when a render type is registered twice."""

    def __init__(self, render_type: Any, registry_name: str = "component"):
        self.render_type = render_type
        self.registry_name = registry_name
        super().__init__(
            f"A {registry_name} component is already registered for type '{render_type}'"
        )


class UnknownGridError(DataGridError):
    """Raised when a grid entity key is not registered."""

    def __init__(self, entity_key: str):
        super().__init__(f"Unknown grid '{entity_key}'", entity_key)


class GridAlreadyRegisteredError(DataGridError):
    """Raised when two grids claim the same entity key."""

    def __init__(self, entity_key: str):
        super().__init__(f"Grid '{entity_key}' is already registered", entity_key)


class QueryPipelineError(DataGridError):
    """Raised when the query pipeline is misconfigured."""

    def __init__(
        self,
        message: str,
        entity_key: Optional[str] = None,
        step_name: Optional[str] = None,
    ):
        self.step_name = step_name
        super().__init__(message, entity_key)


class PreferencesStoreError(DataGridError):
    """Raised when a preference store cannot read or write."""

    def __init__(
        self,
        message: str,
        entity_key: Optional[str] = None,
        store_name: Optional[str] = None,
    ):
        self.store_name = store_name
        super().__init__(message, entity_key)


class UnknownActionError(DataGridError):
    """Raised when an action key is not declared on the grid."""

    def __init__(self, action_key: str, entity_key: Optional[str] = None, bulk: bool = False):
        self.action_key = action_key
        self.bulk = bulk
        kind = "bulk action" if bulk else "row action"
        super().__init__(f"Unknown {kind} '{action_key}'", entity_key)
