"""
Pagination pipeline step.

Always last. Bounds the page size and clamps the page into
``[1, last_page]``.
"""

from django.core.paginator import Paginator
from django.db.models import QuerySet

from ..base import QueryStep
from ..context import GridQueryContext
from ..results import PaginatedResult


class PaginationStep(QueryStep):
    order = 100
    name = "pagination"
    terminal = True

    def apply(self, queryset: QuerySet, ctx: GridQueryContext) -> QuerySet:
        return queryset

    def resolve_per_page(self, ctx: GridQueryContext) -> int:
        per_page = (
            ctx.state.per_page
            or ctx.definition.default_per_page
            or ctx.settings.default_per_page
        )
        try:
            per_page = int(per_page)
        except (TypeError, ValueError):
            per_page = ctx.settings.default_per_page
        return max(1, min(per_page, ctx.settings.max_per_page))

    def execute(self, ctx: GridQueryContext) -> GridQueryContext:
        per_page = self.resolve_per_page(ctx)
        paginator = Paginator(ctx.queryset, per_page)
        last_page = max(paginator.num_pages, 1)
        try:
            page = int(ctx.state.page or 1)
        except (TypeError, ValueError):
            page = 1
        page = min(max(page, 1), last_page)

        page_obj = paginator.page(page)
        ctx.result = PaginatedResult(
            rows=list(page_obj.object_list),
            page=page,
            per_page=per_page,
            total=paginator.count,
            last_page=last_page,
        )
        return ctx
