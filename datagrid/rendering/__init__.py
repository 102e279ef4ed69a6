"""
Render-type registries and cell rendering.
"""

from .cells import CellRenderer, RenderedCell
from .registry import (
    CellComponentRegistry,
    ComponentRegistry,
    FilterComponentRegistry,
    cell_registry,
    filter_registry,
)

__all__ = [
    "CellComponentRegistry",
    "CellRenderer",
    "ComponentRegistry",
    "FilterComponentRegistry",
    "RenderedCell",
    "cell_registry",
    "filter_registry",
]
