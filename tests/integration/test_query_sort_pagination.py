"""
Integration tests for the sorting and pagination stages.
"""

import pytest

from datagrid.constants import SORT_DESC
from datagrid.dsl import Column
from datagrid.grids import DataGrid
from datagrid.query import PipelineBuilder, build_context, run_grid_query
from datagrid.state import GridState
from test_app.grids import CompactMemberGrid, MemberGrid
from test_app.models import Member

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


def _ordering(grid, state):
    ctx = build_context(grid, state)
    PipelineBuilder().build().execute(ctx)
    return ctx


class CustomSortGrid(DataGrid):
    entity_key = "custom_sort"
    model = Member

    def headers(self):
        return [
            Column.make("name").sortable(
                lambda queryset, direction: queryset.order_by(
                    "status" if direction == "asc" else "-status", "name"
                )
            ),
        ]


class TestSortStage:
    """Allow-listed ordering with a stable tiebreaker."""

    def test_sort_by_declared_column(self, members):
        result = run_grid_query(MemberGrid(), GridState(sort_by="name", sort_direction="desc"))
        assert [row.name for row in result.rows] == ["Eve", "Dave", "Carol", "Bob", "Alice"]

    def test_tiebreaker_is_appended(self, members):
        ctx = _ordering(MemberGrid(), GridState(sort_by="created_at", sort_direction="desc"))
        assert ctx.applied_ordering == ["-created_at", "pk"]

    def test_relation_column_uses_lookup(self, members):
        ctx = _ordering(MemberGrid(), GridState(sort_by="team.name"))
        assert ctx.applied_ordering == ["team__name", "pk"]

    def test_header_sort_key(self, members):
        result = run_grid_query(MemberGrid(), GridState(sort_by="joined_on", sort_direction="desc"))
        assert result.rows[0].name == "Eve"

    def test_non_sortable_key_falls_back(self, members):
        ctx = _ordering(MemberGrid(), GridState(sort_by="bio", sort_direction="desc"))
        assert ctx.applied_ordering == ["pk"]
        assert [row.name for row in ctx.result.rows][0] == "Alice"

    def test_grid_sortable_field(self, members):
        ctx = _ordering(MemberGrid(), GridState(sort_by="salary", sort_direction=SORT_DESC))
        assert ctx.applied_ordering == ["-salary", "pk"]
        assert ctx.result.rows[0].name == "Eve"

    def test_invalid_direction_uses_default(self, members):
        ctx = _ordering(MemberGrid(), GridState(sort_by="name", sort_direction="sideways"))
        assert ctx.applied_ordering == ["name", "pk"]

    def test_grid_default_sort(self, members):
        ctx = _ordering(CompactMemberGrid(), GridState(sort_by="email"))
        assert ctx.applied_ordering == ["name", "pk"]

    def test_custom_sort_strategy(self, members):
        result = run_grid_query(CustomSortGrid(), GridState(sort_by="name", sort_direction="asc"))
        assert [row.name for row in result.rows] == ["Alice", "Dave", "Eve", "Carol", "Bob"]


class TestPaginationStage:
    """Page size bounds and page clamping."""

    def test_page_window(self, members):
        result = run_grid_query(MemberGrid(), GridState(per_page=2, page=2))
        assert [row.name for row in result.rows] == ["Carol", "Dave"]
        assert result.total == 5
        assert result.last_page == 3
        assert (result.from_item, result.to_item) == (3, 4)
        assert result.has_next and result.has_previous

    def test_page_past_end_is_clamped(self, members):
        result = run_grid_query(MemberGrid(), GridState(per_page=2, page=99))
        assert result.page == 3
        assert [row.name for row in result.rows] == ["Eve"]

    def test_page_below_one_is_clamped(self, members):
        assert run_grid_query(MemberGrid(), GridState(per_page=2, page=0)).page == 1

    def test_per_page_is_bounded(self, members, settings):
        settings.DATAGRID = {"query_settings": {"max_per_page": 3}}
        result = run_grid_query(MemberGrid(), GridState(per_page=500))
        assert result.per_page == 3

    def test_grid_level_page_size(self, members):
        result = run_grid_query(CompactMemberGrid(), GridState())
        assert result.per_page == 5

    def test_empty_result(self, db):
        result = run_grid_query(MemberGrid(), GridState(page=4))
        assert result.total == 0
        assert result.page == 1
        assert result.rows == []

    def test_same_state_same_rows(self, members):
        state = GridState(search="e", sort_by="name", per_page=2, page=2)
        first = run_grid_query(MemberGrid(), state)
        second = run_grid_query(MemberGrid(), state.copy())
        assert first.row_ids == second.row_ids
        assert first.total == second.total
