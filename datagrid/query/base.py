"""
Base classes for the grid query pipeline.

Provides the QueryStep abstract base class and the QueryPipeline
orchestrator.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from django.db.models import QuerySet

from ..exceptions import QueryPipelineError
from .context import GridQueryContext
from .results import PaginatedResult


class QueryStep(ABC):
    """
    Base class for query pipeline steps.

    Each step narrows or orders the working queryset. ``apply`` can be
    called directly on any queryset, which keeps steps testable in
    isolation.

    Attributes:
        order: Integer determining step execution order (lower = earlier)
        name: String identifier for debugging and logging
        terminal: Terminal steps must run last

    Example:
        class ArchivedScopeStep(QueryStep):
            order = 5
            name = "archived_scope"

            def apply(self, queryset, ctx):
                return queryset.filter(archived_at__isnull=True)
    """

    order: int = 50
    name: str = "base"
    terminal: bool = False

    @abstractmethod
    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        """Return ``queryset`` narrowed or ordered by this step."""

    def execute(self, ctx: GridQueryContext) -> GridQueryContext:
        ctx.queryset = self.apply(ctx.queryset, ctx)
        return ctx

    def should_run(self, ctx: GridQueryContext) -> bool:
        return not ctx.should_abort

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} order={self.order} name={self.name}>"


class QueryPipeline:
    """
    Executes an ordered sequence of query steps.

    Steps are sorted by ``order``. A terminal step (pagination) must sort
    last; anything ordered after it is a configuration error.
    """

    def __init__(self, steps: List[QueryStep]):
        self.steps = sorted(steps, key=lambda s: s.order)
        self._validate()

    def _validate(self) -> None:
        for index, step in enumerate(self.steps):
            if step.terminal and index != len(self.steps) - 1:
                following = [s.name for s in self.steps[index + 1:]]
                raise QueryPipelineError(
                    f"Step '{step.name}' must run last, found {following} after it",
                    step_name=step.name,
                )

    def execute(self, ctx: GridQueryContext) -> GridQueryContext:
        for step in self.steps:
            if step.should_run(ctx):
                ctx = step.execute(ctx)
        return ctx

    def run(self, ctx: GridQueryContext) -> Optional[PaginatedResult]:
        return self.execute(ctx).result

    def get_step_names(self) -> List[str]:
        return [s.name for s in self.steps]

    def __repr__(self) -> str:
        return f"<QueryPipeline steps={self.get_step_names()}>"


class ConditionalStep(QueryStep):
    """
    Wraps a step with a custom condition function.

    Example:
        step = ConditionalStep(SearchStep(), condition=lambda ctx: ctx.state.search)
    """

    def __init__(self, step: QueryStep, condition: Callable[[GridQueryContext], bool]):
        self.step = step
        self.condition = condition
        self.order = step.order
        self.name = f"conditional_{step.name}"
        self.terminal = step.terminal

    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        return self.step.apply(queryset, ctx)

    def execute(self, ctx: GridQueryContext) -> GridQueryContext:
        return self.step.execute(ctx)

    def should_run(self, ctx: GridQueryContext) -> bool:
        return self.step.should_run(ctx) and bool(self.condition(ctx))
