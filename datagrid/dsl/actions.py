"""
Row and bulk action declarations.

Actions carry optional strategies (execute handler, route resolver,
confirmation callback). The compiled view never exposes the callables
themselves, only boolean capability flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from .base import (
    Visibility,
    evaluate_visibility,
    humanize,
    user_has_permission,
    validate_permission,
)


@dataclass
class ConfirmationView:
    """A confirmation rendered by a host view instead of a plain message."""

    view: str
    props: Dict[str, Any] = field(default_factory=dict)
    title: Optional[str] = None


Confirmation = Union[str, Callable[[Any], Any], ConfirmationView]


class BaseAction:
    """Attributes shared by row and bulk actions."""

    def __init__(self, key: str, label: Optional[str] = None):
        self.key = key
        self.label = label if label is not None else humanize(key)
        self.icon_name: Optional[str] = None
        self.variant_name = "ghost"
        self.color_name: Optional[str] = None
        self.confirmation: Optional[Confirmation] = None
        self.permission: Optional[str] = None
        self.handler: Optional[Callable[..., Any]] = None
        self.route_resolver: Optional[Union[str, Callable[[Any], str]]] = None
        self.modal_view: Optional[str] = None
        self.modal_props: Dict[str, Any] = {}
        self.modal_type = "modal"
        self.modal_title: Optional[str] = None
        self.visibility: Visibility = True

    @classmethod
    def make(cls, key: str, label: Optional[str] = None):
        return cls(key, label)

    def icon(self, name: str):
        self.icon_name = name
        return self

    def variant(self, name: str):
        self.variant_name = name
        return self

    def color(self, name: str):
        self.color_name = name
        return self

    def confirm(self, confirmation: Confirmation = "Are you sure?"):
        self.confirmation = confirmation
        return self

    def permission_required(self, permission: str):
        self.permission = validate_permission(permission, self.key)
        return self

    def handle(self, handler: Callable[..., Any]):
        self.handler = handler
        return self

    def route(self, route: Union[str, Callable[[Any], str]]):
        self.route_resolver = route
        return self

    def modal(
        self,
        view: str,
        props: Optional[Dict[str, Any]] = None,
        modal_type: str = "modal",
        title: Optional[str] = None,
    ):
        self.modal_view = view
        self.modal_props = dict(props or {})
        self.modal_type = modal_type
        self.modal_title = title
        return self

    def show(self, flag: Visibility = True):
        self.visibility = flag
        return self

    # Runtime helpers -------------------------------------------------------

    @property
    def has_execute(self) -> bool:
        return self.handler is not None

    @property
    def has_route(self) -> bool:
        return self.route_resolver is not None

    @property
    def has_modal(self) -> bool:
        return self.modal_view is not None

    @property
    def requires_confirmation(self) -> bool:
        return self.confirmation is not None

    def is_visible(self, user: Any = None) -> bool:
        return evaluate_visibility(self.visibility, user)

    def is_permitted(self, user: Any = None) -> bool:
        return user_has_permission(user, self.permission)

    def resolve_route(self, target: Any = None) -> Optional[str]:
        if callable(self.route_resolver):
            return self.route_resolver(target)
        return self.route_resolver

    def resolve_confirmation(self, target: Any = None) -> Optional[Dict[str, Any]]:
        """
        Resolve the confirmation for ``target`` (a row or a list of ids).

        Returns ``None`` when the action needs no confirmation, otherwise a
        dict with ``type`` set to ``"message"`` or ``"view"``.
        """
        confirmation = self.confirmation
        if confirmation is None:
            return None
        if callable(confirmation) and not isinstance(confirmation, ConfirmationView):
            confirmation = confirmation(target)
            if confirmation is None or confirmation is False:
                return None
        if isinstance(confirmation, ConfirmationView):
            return {
                "type": "view",
                "view": confirmation.view,
                "props": dict(confirmation.props),
                "title": confirmation.title or self.label,
            }
        return {"type": "message", "message": str(confirmation), "title": self.label}

    def to_view(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "icon": self.icon_name,
            "variant": self.variant_name,
            "color": self.color_name,
            "has_execute": self.has_execute,
            "has_route": self.has_route,
            "has_modal": self.has_modal,
            "modal_type": self.modal_type if self.has_modal else None,
            "requires_confirmation": self.requires_confirmation,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} key={self.key!r}>"


class RowAction(BaseAction):
    """An action offered on each row."""

    def __init__(self, key: str, label: Optional[str] = None):
        super().__init__(key, label)
        self.row_predicate: Optional[Callable[[Any], bool]] = None

    def visible_when(self, predicate: Callable[[Any], bool]) -> "RowAction":
        """Offer the action only on rows for which ``predicate(row)`` holds."""
        self.row_predicate = predicate
        return self

    def is_visible_for(self, row: Any) -> bool:
        if self.row_predicate is None:
            return True
        return bool(self.row_predicate(row))

    def to_view(self) -> Dict[str, Any]:
        data = super().to_view()
        data["has_row_condition"] = self.row_predicate is not None
        return data


class BulkAction(BaseAction):
    """An action applied to the selected rows."""
