"""
Declarative building blocks for data grids.
"""

from .actions import BulkAction, ConfirmationView, RowAction
from .columns import Column
from .definition import DefinitionBuilder, TableDefinition
from .filters import Filter
from .headers import Header

__all__ = [
    "BulkAction",
    "Column",
    "ConfirmationView",
    "DefinitionBuilder",
    "Filter",
    "Header",
    "RowAction",
    "TableDefinition",
]
