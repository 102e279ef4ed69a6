"""
Pipeline Builder - Builds grid query pipelines.
"""

from typing import List, Optional

from ..grids import DataGrid
from ..state import GridState
from .base import QueryPipeline, QueryStep
from .context import GridQueryContext
from .results import PaginatedResult
from .steps import FilterStep, PaginationStep, SearchStep, SortStep


class PipelineBuilder:
    """
    Builds query pipelines with configurable steps.

    Example:
        pipeline = PipelineBuilder().add_step(ArchivedScopeStep()).build()
        result = pipeline.run(ctx)
    """

    def __init__(self):
        self._custom_steps: List[QueryStep] = []
        self._skip_steps: List[str] = []

    def add_step(self, step: QueryStep) -> "PipelineBuilder":
        self._custom_steps.append(step)
        return self

    def skip_step(self, name: str) -> "PipelineBuilder":
        self._skip_steps.append(name)
        return self

    def build(self) -> QueryPipeline:
        steps: List[QueryStep] = [SearchStep(), FilterStep(), SortStep(), PaginationStep()]
        steps.extend(self._custom_steps)
        return QueryPipeline([s for s in steps if s.name not in self._skip_steps])


def build_context(grid: DataGrid, state: GridState) -> GridQueryContext:
    return GridQueryContext(
        definition=grid.get_definition(),
        queryset=grid.get_queryset(),
        state=state,
        grid=grid,
        settings=grid.settings,
    )


def run_grid_query(
    grid: DataGrid,
    state: GridState,
    pipeline: Optional[QueryPipeline] = None,
) -> PaginatedResult:
    """Resolve one page of ``grid`` for ``state``."""
    pipeline = pipeline or PipelineBuilder().build()
    return pipeline.run(build_context(grid, state))
