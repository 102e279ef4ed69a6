"""
Action dispatching.

Resolves a row or bulk action by key, checks that the current user may
run it on the target, and performs it: open a modal, redirect to a route,
or call the execute handler. Actions with a confirmation are held back
until the confirmation comes in.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.db.models import QuerySet

from ..dsl.actions import BaseAction, BulkAction, RowAction
from ..dsl.definition import TableDefinition
from ..exceptions import UnknownActionError
from .signals import OPEN_MODAL, SignalBus

logger = logging.getLogger(__name__)

STATUS_EXECUTED = "executed"
STATUS_REDIRECT = "redirect"
STATUS_MODAL = "modal"
STATUS_CONFIRM = "confirm"
STATUS_NOOP = "noop"


@dataclass
class ActionResult:
    action_key: str
    status: str
    is_bulk: bool = False
    redirect_url: Optional[str] = None
    confirmation: Optional[Dict[str, Any]] = None
    target_ids: List[str] = field(default_factory=list)
    value: Any = None

    @property
    def changed_data(self) -> bool:
        return self.status == STATUS_EXECUTED


class ActionDispatcher:
    def __init__(self, definition: TableDefinition, signals: SignalBus):
        self.definition = definition
        self.signals = signals

    def get_row_action(self, key: str) -> RowAction:
        action = self.definition.get_row_action(key)
        if action is None:
            raise UnknownActionError(key, self.definition.entity_key)
        return action

    def get_bulk_action(self, key: str) -> BulkAction:
        action = self.definition.get_bulk_action(key)
        if action is None:
            raise UnknownActionError(key, self.definition.entity_key, bulk=True)
        return action

    def dispatch_row(self, key: str, row: Any, confirmed: bool = False) -> ActionResult:
        action = self.get_row_action(key)
        row_id = str(getattr(row, "pk", ""))
        if not action.is_visible_for(row):
            logger.warning(
                f"Row action '{key}' is not available on row {row_id}",
                extra={"entity_key": self.definition.entity_key, "action": key},
            )
            return ActionResult(action_key=key, status=STATUS_NOOP, target_ids=[row_id])

        if not confirmed:
            confirmation = action.resolve_confirmation(row)
            if confirmation is not None:
                return ActionResult(
                    action_key=key,
                    status=STATUS_CONFIRM,
                    confirmation=confirmation,
                    target_ids=[row_id],
                )
        return self._perform(action, row, [row_id], is_bulk=False)

    def dispatch_bulk(
        self, key: str, queryset: QuerySet, ids: List[str], confirmed: bool = False
    ) -> ActionResult:
        action = self.get_bulk_action(key)
        if not ids:
            return ActionResult(action_key=key, status=STATUS_NOOP, is_bulk=True)
        if not confirmed:
            confirmation = action.resolve_confirmation(ids)
            if confirmation is not None:
                return ActionResult(
                    action_key=key,
                    status=STATUS_CONFIRM,
                    is_bulk=True,
                    confirmation=confirmation,
                    target_ids=list(ids),
                )
        return self._perform(action, queryset, list(ids), is_bulk=True)

    def open_modal(self, action: BaseAction, target_ids: List[str]) -> None:
        props = dict(action.modal_props)
        if isinstance(action, BulkAction):
            props.setdefault("ids", target_ids)
        elif target_ids:
            props.setdefault("id", target_ids[0])
        self.signals.emit(
            OPEN_MODAL,
            view_path=action.modal_view,
            view_type=action.modal_type,
            view_props=props,
            view_title=action.modal_title or action.label,
            datagrid_id=self.definition.entity_key,
        )

    def _perform(
        self, action: BaseAction, target: Any, target_ids: List[str], is_bulk: bool
    ) -> ActionResult:
        if action.has_modal:
            self.open_modal(action, target_ids)
            return ActionResult(
                action_key=action.key, status=STATUS_MODAL, is_bulk=is_bulk, target_ids=target_ids
            )
        if action.has_execute:
            value = action.handler(target)
            logger.info(
                f"Executed {'bulk' if is_bulk else 'row'} action '{action.key}' "
                f"on {len(target_ids)} row(s)",
                extra={"entity_key": self.definition.entity_key, "action": action.key},
            )
            return ActionResult(
                action_key=action.key,
                status=STATUS_EXECUTED,
                is_bulk=is_bulk,
                target_ids=target_ids,
                value=value,
            )
        if action.has_route:
            return ActionResult(
                action_key=action.key,
                status=STATUS_REDIRECT,
                is_bulk=is_bulk,
                redirect_url=action.resolve_route(target),
                target_ids=target_ids,
            )
        return ActionResult(
            action_key=action.key, status=STATUS_NOOP, is_bulk=is_bulk, target_ids=target_ids
        )
