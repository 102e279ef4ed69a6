"""
Resolvers backing the grid GraphQL fields.
"""

import json
import logging
from typing import Any, Dict

from django.core.serializers.json import DjangoJSONEncoder
from graphql import GraphQLError

from ..controller.actions import STATUS_NOOP
from ..controller.grid import GridController
from ..exceptions import DataGridError, UnknownGridError
from ..grids import DataGrid
from ..registry import grid_registry

logger = logging.getLogger(__name__)


def _to_json_safe(value):
    """
    Normalize nested payload values to JSON-safe primitives.
    This avoids Graphene JSONString serialization errors (e.g. Decimal).
    """
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def _get_grid(entity: str, request) -> DataGrid:
    try:
        return grid_registry.get_grid(entity, user=getattr(request, "user", None))
    except UnknownGridError as exc:
        raise GraphQLError(str(exc)) from exc


def _params_from_input(input_data: Dict[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    mapping = {
        "search": "search",
        "sort": "sort",
        "direction": "direction",
        "perPage": "per_page",
        "page": "page",
        "filters": "filters",
    }
    for source, target in mapping.items():
        value = input_data.get(source)
        if value is not None:
            params[target] = value
    return params


def resolve_grid_rows(request, input_data: Dict[str, Any]) -> Dict[str, Any]:
    grid = _get_grid(input_data["entity"], request)
    controller = GridController(grid, request, alias="")
    controller.mount(_params_from_input(input_data))
    result = controller.result()

    payload = {
        "pageInfo": {
            "totalCount": result.total,
            "pageCount": result.last_page,
            "currentPage": result.page,
            "perPage": result.per_page,
            "fromItem": result.from_item,
            "toItem": result.to_item,
            "hasNextPage": result.has_next,
            "hasPreviousPage": result.has_previous,
        },
        "items": _to_json_safe(controller.render_rows(result.rows)),
        "definition": _to_json_safe(controller.definition.to_view_projection()),
        "state": _to_json_safe({**controller.state.to_preferences(), "page": result.page}),
        "activeFilters": _to_json_safe(controller.active_filters()),
        "events": [signal.to_dict() for signal in controller.signals.drain()],
        "shareUrl": controller.share_url(),
    }
    controller.end_render_pass()
    return payload


def execute_grid_action(request, input_data: Dict[str, Any]) -> Dict[str, Any]:
    grid = _get_grid(input_data["entity"], request)
    controller = GridController(grid, request, alias="")
    row_ids = [str(row_id) for row_id in input_data.get("rowIds") or []]
    confirmed = bool(input_data.get("confirmed"))
    key = input_data["actionKey"]

    try:
        if input_data.get("isBulk"):
            for row_id in row_ids:
                controller.selection.select(row_id)
            result = controller.execute_bulk_action(key, confirmed=confirmed)
        else:
            if not row_ids:
                raise GraphQLError("Row actions need exactly one row id")
            result = controller.execute_action(key, row_ids[0], confirmed=confirmed)
    except DataGridError as exc:
        raise GraphQLError(str(exc)) from exc

    return {
        "ok": result.status != STATUS_NOOP,
        "status": result.status,
        "redirectUrl": result.redirect_url,
        "confirmation": _to_json_safe(result.confirmation),
        "events": [signal.to_dict() for signal in controller.signals.drain()],
    }


def clear_grid_preferences(request, entity: str) -> Dict[str, Any]:
    grid = _get_grid(entity, request)
    controller = GridController(grid, request, alias="")
    return {"ok": controller.preferences.clear()}
