"""
Reactive grid controller and its collaborators.
"""

from .actions import ActionDispatcher, ActionResult
from .grid import GridController
from .memo import RenderMemo
from .selection import SelectionState
from .signals import GridSignal, SignalBus, grid_event

__all__ = [
    "ActionDispatcher",
    "ActionResult",
    "GridController",
    "GridSignal",
    "RenderMemo",
    "SelectionState",
    "SignalBus",
    "grid_event",
]
