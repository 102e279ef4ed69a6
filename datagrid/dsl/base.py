"""
Helpers shared by the DSL builders.
"""

import logging
import re
from typing import Any, Callable, Optional, Union

from ..exceptions import DefinitionError

logger = logging.getLogger(__name__)

Visibility = Union[bool, Callable[[Any], bool]]

_PERMISSION_PATTERN = re.compile(r"^[A-Za-z_][\w]*\.[\w]+$")


def humanize(key: str) -> str:
    """Turn ``team.created_at`` into ``Team created at``."""
    text = key.replace(".", " ").replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def evaluate_visibility(flag: Visibility, user: Any = None) -> bool:
    """Evaluate a bool or a ``callable(user)`` visibility flag."""
    if callable(flag):
        return bool(flag(user))
    return bool(flag)


def validate_permission(permission: Optional[str], item_key: str) -> Optional[str]:
    """
    Validate a Django permission string (``app_label.codename``).

    Raises:
        DefinitionError: If the permission is not a well-formed string.
    """
    if permission is None:
        return None
    if not isinstance(permission, str) or not _PERMISSION_PATTERN.match(permission):
        raise DefinitionError(
            f"Invalid permission '{permission}' on '{item_key}', "
            "expected 'app_label.codename'",
            item_key=item_key,
        )
    return permission


def user_has_permission(user: Any, permission: Optional[str]) -> bool:
    if permission is None:
        return True
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return bool(user.has_perm(permission))


def to_lookup(path: str) -> str:
    """Convert a dot-separated relation path to an ORM lookup."""
    return path.replace(".", "__")


def project_for_view(value: Any) -> Any:
    """Copy ``value`` for the view projection; callables become ``True``."""
    if callable(value):
        return True
    if isinstance(value, dict):
        return {key: project_for_view(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [project_for_view(item) for item in value]
    return value
