"""
Reactive grid controller.

``GridController`` owns the view state of one grid for one request and
composes the collaborators that act on it: state reconciliation,
the query pipeline, selection, action dispatch, per-pass memoization and
outbound UI signals.

Every user-facing state change persists the preference bag, resets the page
to 1, resets the incremental row window and emits ``scroll-to-top``.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

from ..constants import (
    FILTER_NOT,
    PARAM_DIRECTION,
    PARAM_PAGE,
    PARAM_PER_PAGE,
    PARAM_SEARCH,
    PARAM_SORT,
    SORT_ASC,
    SORT_DESC,
    FilterType,
)
from ..dsl.actions import BulkAction, RowAction
from ..grids import DataGrid
from ..preferences.reconciliation import ReconciledState, StateReconciler
from ..preferences.service import GridPreferencesService
from ..query.base import QueryPipeline
from ..query.builder import PipelineBuilder, build_context
from ..query.results import PaginatedResult
from ..query.steps.filtering import is_empty_filter_value
from ..rendering.cells import CellRenderer
from ..state import GridState
from .actions import STATUS_EXECUTED, STATUS_NOOP, ActionDispatcher, ActionResult
from .memo import RenderMemo
from .selection import SelectionState
from .signals import (
    ACTION_CONFIRMED,
    CLEAN_URL,
    CLOSE_MODAL,
    SCROLL_TO_TOP,
    SELECTION_CHANGED,
    SignalBus,
)

logger = logging.getLogger(__name__)


class GridController:
    """
    Drive one grid for one request.

    Example:
        controller = GridController(MemberGrid(request.user), request)
        controller.mount(request.GET)
        controller.sort_by("name")
        payload = controller.to_view()
        controller.end_render_pass()
    """

    def __init__(
        self,
        grid: DataGrid,
        request,
        pipeline: Optional[QueryPipeline] = None,
        renderer: Optional[CellRenderer] = None,
        alias: Optional[str] = None,
    ):
        self.grid = grid
        self.request = request
        self.settings = grid.settings
        self.definition = grid.get_definition()
        self.pipeline = pipeline or PipelineBuilder().build()
        self.renderer = renderer or CellRenderer(settings=self.settings)
        self.preferences = GridPreferencesService.for_request(
            request, grid.entity_key, self.settings
        )
        self.signals = SignalBus(grid.entity_key, sender=type(self))
        self.selection = SelectionState()
        self.memo = RenderMemo()
        self.actions = ActionDispatcher(self.definition, self.signals)
        self.alias = alias if alias is not None else self.settings.query_param_alias
        self.state = self.default_state()
        self.visible_rows = self.settings.incremental_window
        self._user = None

    @property
    def entity_key(self) -> str:
        return self.grid.entity_key

    @property
    def user(self):
        if self._user is None:
            self._user = getattr(self.request, "user", None)
        return self._user

    def default_state(self) -> GridState:
        state = GridState(per_page=self.grid.get_page_size())
        default_sort = self.definition.default_sort or self.grid.default_sort
        if default_sort is not None:
            state.sort_by, state.sort_direction = default_sort
        return state

    # Lifecycle -------------------------------------------------------------

    def mount(self, params: Optional[Mapping] = None) -> ReconciledState:
        """Reconcile the initial state from query parameters and preferences."""
        reconciler = StateReconciler(self.preferences, self.default_state(), self.alias)
        reconciled = reconciler.reconcile(params)
        self.state = reconciled.state
        if reconciled.clean_url:
            self.signals.emit(CLEAN_URL, params=sorted(reconciled.query_fields))
        return reconciled

    def end_render_pass(self) -> None:
        self.memo.clear()

    # Derived data ----------------------------------------------------------

    def result(self) -> PaginatedResult:
        return self.memo.memoize(
            "result",
            lambda: self.pipeline.run(build_context(self.grid, self.state.copy())),
            inputs={**self.state.to_preferences(), "page": self.state.page},
        )

    @property
    def rows(self) -> List[Any]:
        return self.result().rows

    @property
    def visible_row_slice(self) -> List[Any]:
        return self.rows[: self.visible_rows]

    @property
    def has_more_rows(self) -> bool:
        return len(self.rows) > self.visible_rows

    def active_filters(self) -> List[Dict[str, Any]]:
        """Describe each applied filter with a human readable value label."""

        def compute():
            chips = []
            for key, value in self.state.filters.items():
                definition = self.definition.get_filter(key)
                if definition is None or is_empty_filter_value(value):
                    continue
                chips.append(
                    {
                        "key": key,
                        "label": definition.label,
                        "value": value,
                        "value_label": self._value_label(definition, value),
                    }
                )
            return chips

        return self.memo.memoize("active_filters", compute, inputs=self.state.filters)

    def _value_label(self, definition, value: Any) -> str:
        if definition.type_value == FilterType.DATE_RANGE.value and isinstance(value, dict):
            start, end = value.get("from"), value.get("to")
            if start and end:
                return f"{start} - {end}"
            if start:
                return f"From {start}"
            return f"To {end}"
        if definition.type_value == FilterType.BOOLEAN.value and len(definition.get_options()) == 1:
            return "Yes" if str(value).lower() in ("1", "true") else "No"
        if isinstance(value, dict) and FILTER_NOT in value:
            excluded = value[FILTER_NOT]
            excluded = excluded if isinstance(excluded, (list, tuple)) else [excluded]
            return "Not " + ", ".join(definition.label_for(item) for item in excluded)
        if isinstance(value, (list, tuple)):
            return ", ".join(definition.label_for(item) for item in value)
        return definition.label_for(value)

    # State mutations -------------------------------------------------------

    def set_search(self, term: str) -> None:
        self.state.search = (term or "").strip()
        self.apply_changes()

    def sort_by(self, key: str) -> None:
        """
        Sort by ``key``. Re-selecting the current key flips the direction;
        a new key starts at its default direction.
        """
        if key == self.state.sort_by:
            self.state.sort_direction = (
                SORT_DESC if self.state.sort_direction == SORT_ASC else SORT_ASC
            )
        else:
            field = self.grid.get_sortable_field(key)
            self.state.sort_by = key
            self.state.sort_direction = (
                field.default_direction if field is not None
                else self.settings.default_sort_direction
            )
        self.apply_changes()

    def set_filter(self, key: str, value: Any) -> None:
        if self.definition.get_filter(key) is None:
            logger.debug(f"Ignoring undeclared filter '{key}' on grid '{self.entity_key}'")
            return
        filters = dict(self.state.filters)
        if is_empty_filter_value(value):
            filters.pop(key, None)
        else:
            filters[key] = value
        for child in self.definition.filters:
            if child.parent_key == key:
                filters.pop(child.key, None)
        self.state.filters = filters
        self.apply_changes()

    def remove_filter(self, key: str) -> None:
        self.set_filter(key, None)

    def clear_filters(self) -> None:
        self.state.filters = {}
        self.apply_changes()

    def set_per_page(self, per_page: int) -> None:
        try:
            per_page = int(per_page)
        except (TypeError, ValueError):
            return
        if per_page <= 0:
            return
        self.state.per_page = min(per_page, self.settings.max_per_page)
        self.apply_changes()

    def goto_page(self, page: int) -> None:
        try:
            page = int(page)
        except (TypeError, ValueError):
            return
        self.state.page = max(page, 1)
        self.refresh()

    def next_page(self) -> None:
        result = self.result()
        if result.has_next:
            self.goto_page(result.page + 1)

    def previous_page(self) -> None:
        result = self.result()
        if result.has_previous:
            self.goto_page(result.page - 1)

    def load_more(self) -> None:
        self.visible_rows += self.settings.incremental_window

    def apply_changes(self) -> None:
        self.state.page = 1
        self.preferences.save(self.state.to_preferences())
        self.refresh()

    def refresh(self) -> None:
        self.visible_rows = self.settings.incremental_window
        self.memo.clear()
        self.signals.emit(SCROLL_TO_TOP)

    def clear_preferences(self) -> None:
        self.preferences.clear()
        self.state = self.default_state()
        self.refresh()

    # Selection -------------------------------------------------------------

    def page_row_ids(self) -> List[str]:
        return [str(row_id) for row_id in self.result().row_ids]

    def toggle_row(self, row_id: Any) -> None:
        self.selection.toggle(row_id)
        self.signals.emit(SELECTION_CHANGED, selected=self.selection.ids)

    def toggle_select_all(self) -> None:
        self.selection.toggle_all(self.page_row_ids())
        self.signals.emit(SELECTION_CHANGED, selected=self.selection.ids)

    def clear_selection(self) -> None:
        self.selection.clear()
        self.signals.emit(SELECTION_CHANGED, selected=[])

    @property
    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self.page_row_ids())

    # Actions ---------------------------------------------------------------

    def row_actions_for(self, row: Any) -> List[RowAction]:
        return self.definition.row_actions_for(row)

    @property
    def bulk_actions(self) -> List[BulkAction]:
        return list(self.definition.bulk_actions)

    def get_row(self, row_id: Any):
        return self.grid.get_queryset().filter(pk=row_id).first()

    def execute_action(self, key: str, row_id: Any, confirmed: bool = False) -> ActionResult:
        row = self.get_row(row_id)
        if row is None:
            logger.warning(
                f"Row {row_id} not found for action '{key}' on grid '{self.entity_key}'"
            )
            return ActionResult(action_key=key, status=STATUS_NOOP, target_ids=[str(row_id)])
        result = self.actions.dispatch_row(key, row, confirmed=confirmed)
        if result.status == STATUS_EXECUTED:
            self.memo.clear()
        return result

    def execute_bulk_action(self, key: str, confirmed: bool = False) -> ActionResult:
        ids = self.selection.ids
        queryset = self.grid.get_queryset().filter(pk__in=ids)
        result = self.actions.dispatch_bulk(key, queryset, ids, confirmed=confirmed)
        if result.status == STATUS_EXECUTED:
            self.selection.clear()
            self.refresh()
        return result

    def get_action_confirmation(self, key: str, row_id: Any) -> Optional[Dict[str, Any]]:
        row = self.get_row(row_id)
        return self.actions.get_row_action(key).resolve_confirmation(row)

    def get_bulk_action_confirmation(self, key: str) -> Optional[Dict[str, Any]]:
        return self.actions.get_bulk_action(key).resolve_confirmation(self.selection.ids)

    def on_action_confirmed(self, payload: Mapping[str, Any]) -> ActionResult:
        """Run a previously confirmed action from an ``action-confirmed`` payload."""
        key = payload["action_key"]
        is_bulk = bool(payload.get("is_bulk"))
        target_ids = [str(row_id) for row_id in payload.get("target_ids") or []]
        self.signals.emit(ACTION_CONFIRMED, action_key=key, target_ids=target_ids, is_bulk=is_bulk)
        self.signals.emit(CLOSE_MODAL)
        if is_bulk:
            return self.execute_bulk_action(key, confirmed=True)
        if not target_ids:
            return ActionResult(action_key=key, status=STATUS_NOOP)
        return self.execute_action(key, target_ids[0], confirmed=True)

    def open_action_modal(self, key: str, row_id: Any) -> None:
        action = self.actions.get_row_action(key)
        self.actions.open_modal(action, [str(row_id)])

    def handle_row_click(self, row_id: Any) -> Optional[ActionResult]:
        row = self.get_row(row_id)
        if row is None:
            return None
        action = self.grid.row_click(row)
        if action is None:
            return None
        return self.actions.dispatch_row(action.key, row)

    @property
    def row_click_opens_modal(self) -> bool:
        """Whether the configured row-click action has a modal, independent of any row."""

        def compute() -> bool:
            key = self.grid.row_click_action
            if not key:
                return False
            action = self.definition.get_row_action(key)
            return bool(action is not None and action.has_modal)

        return self.memo.memoize("row_click_opens_modal", compute)

    # Output ----------------------------------------------------------------

    def query_params(self) -> Dict[str, Any]:
        """Flatten the current state into recognized query parameters."""

        def name(param: str) -> str:
            return f"{self.alias}_{param}" if self.alias else param

        params: Dict[str, Any] = {}
        if self.state.search:
            params[name(PARAM_SEARCH)] = self.state.search
        if self.state.sort_by:
            params[name(PARAM_SORT)] = self.state.sort_by
            params[name(PARAM_DIRECTION)] = self.state.sort_direction
        if self.state.per_page:
            params[name(PARAM_PER_PAGE)] = self.state.per_page
        if self.state.page > 1:
            params[name(PARAM_PAGE)] = self.state.page
        for key, value in self.state.filters.items():
            base = name(f"filters[{key}]")
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, (list, tuple)):
                        params[f"{base}[{sub_key}][]"] = list(sub_value)
                    else:
                        params[f"{base}[{sub_key}]"] = sub_value
            elif isinstance(value, (list, tuple)):
                params[f"{base}[]"] = list(value)
            else:
                params[base] = value
        return params

    def share_url(self, path: Optional[str] = None) -> str:
        path = path if path is not None else getattr(self.request, "path", "")
        query = urlencode(self.query_params(), doseq=True)
        return f"{path}?{query}" if query else path

    def render_rows(self, rows: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        columns = self.definition.columns
        rendered = []
        for row in self.visible_row_slice if rows is None else rows:
            row_id = str(row.pk)
            rendered.append(
                {
                    "id": row_id,
                    "selected": self.selection.is_selected(row_id),
                    "cells": [cell.to_dict() for cell in self.renderer.render_row(columns, row)],
                    "actions": [action.key for action in self.row_actions_for(row)],
                }
            )
        return rendered

    def to_view(self) -> Dict[str, Any]:
        result = self.result()
        return {
            "definition": self.definition.to_view_projection(),
            "rows": self.render_rows(),
            "page_info": result.page_info(),
            "state": {**self.state.to_preferences(), "page": result.page},
            "active_filters": self.active_filters(),
            "selection": self.selection.ids,
            "is_all_selected": self.is_all_selected,
            "visible_rows": self.visible_rows,
            "has_more_rows": self.has_more_rows,
            "row_click_opens_modal": self.row_click_opens_modal,
            "share_url": self.share_url(),
        }
