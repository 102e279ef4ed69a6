"""
Grid query pipeline: search, filter, sort, paginate.
"""

from .base import ConditionalStep, QueryPipeline, QueryStep
from .builder import PipelineBuilder, build_context, run_grid_query
from .context import GridQueryContext
from .results import PaginatedResult

__all__ = [
    "ConditionalStep",
    "GridQueryContext",
    "PaginatedResult",
    "PipelineBuilder",
    "QueryPipeline",
    "QueryStep",
    "build_context",
    "run_grid_query",
]
