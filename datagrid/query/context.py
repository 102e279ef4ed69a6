"""
GridQueryContext - Carries state through the query pipeline.

The context is created once per grid query and passed through each step.
Steps narrow ``queryset``; the pagination step fills ``result``.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from django.db.models import QuerySet

from ..settings import GridSettings
from ..state import GridState

if TYPE_CHECKING:
    from ..dsl.definition import TableDefinition
    from ..grids import DataGrid
    from .results import PaginatedResult


@dataclass
class GridQueryContext:
    """
    Carries state through the query pipeline.

    Attributes:
        definition: Compiled table definition for the current user
        queryset: Working queryset, narrowed by each step
        state: Submitted grid state (search, filters, sort, page)
        grid: Host grid declaration, used for fallbacks
        settings: Resolved grid settings
        applied_ordering: ORM ordering chosen by the sort step
        applied_filters: Filter keys actually applied
        result: Page produced by the pagination step
        should_abort: Flag indicating pipeline should stop
        extra: Dictionary for storing additional step-specific data
    """

    definition: "TableDefinition"
    queryset: QuerySet
    state: GridState
    grid: Optional["DataGrid"] = None
    settings: GridSettings = field(default_factory=GridSettings)

    applied_ordering: list[str] = field(default_factory=list)
    applied_filters: list[str] = field(default_factory=list)
    result: Optional["PaginatedResult"] = None

    should_abort: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def model(self):
        return self.queryset.model

    @property
    def entity_key(self) -> Optional[str]:
        return self.definition.entity_key
