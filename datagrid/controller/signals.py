"""
Outbound UI signals.

The controller never talks to the presentation layer directly. It emits
``GridSignal`` records that the host forwards to the browser, and each
signal is also broadcast through the Django ``grid_event`` signal.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Sent with ``grid_signal=GridSignal``.
grid_event = Signal()

SCROLL_TO_TOP = "scroll-to-top"
CLEAN_URL = "clean-url"
OPEN_MODAL = "open-modal"
CLOSE_MODAL = "close-modal"
ACTION_CONFIRMED = "action-confirmed"
SELECTION_CHANGED = "selection-changed"


@dataclass
class GridSignal:
    name: str
    entity_key: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def event_name(self) -> str:
        return f"datagrid:{self.name}:{self.entity_key}"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event_name, "payload": dict(self.payload)}


class SignalBus:
    def __init__(self, entity_key: str, sender: Any = None):
        self.entity_key = entity_key
        self.sender = sender
        self._pending: List[GridSignal] = []

    def emit(self, name: str, **payload: Any) -> GridSignal:
        signal = GridSignal(name=name, entity_key=self.entity_key, payload=payload)
        self._pending.append(signal)
        logger.debug(f"Emitting {signal.event_name}")
        grid_event.send(sender=self.sender or type(self), grid_signal=signal)
        return signal

    @property
    def pending(self) -> List[GridSignal]:
        return list(self._pending)

    def names(self) -> List[str]:
        return [signal.name for signal in self._pending]

    def drain(self) -> List[GridSignal]:
        signals, self._pending = self._pending, []
        return signals
