"""
Unit tests for query pipeline ordering and the grid registry.
"""

import pytest

from datagrid.exceptions import (
    DefinitionError,
    GridAlreadyRegisteredError,
    QueryPipelineError,
    UnknownGridError,
)
from datagrid.grids import DataGrid
from datagrid.query import PipelineBuilder, QueryPipeline, QueryStep
from datagrid.query.steps import FilterStep, PaginationStep, SearchStep, SortStep
from datagrid.registry import GridRegistry

pytestmark = pytest.mark.unit


class ScopeStep(QueryStep):
    order = 5
    name = "scope"

    def apply(self, queryset, ctx):
        return queryset


class LateStep(QueryStep):
    order = 200
    name = "late"

    def apply(self, queryset, ctx):
        return queryset


class TestQueryPipeline:
    def test_default_order(self):
        pipeline = PipelineBuilder().build()
        assert pipeline.get_step_names() == ["search", "filtering", "sorting", "pagination"]

    def test_steps_are_sorted(self):
        pipeline = QueryPipeline([PaginationStep(), SortStep(), SearchStep(), FilterStep()])
        assert pipeline.get_step_names() == ["search", "filtering", "sorting", "pagination"]

    def test_custom_step_runs_first(self):
        pipeline = PipelineBuilder().add_step(ScopeStep()).build()
        assert pipeline.get_step_names()[0] == "scope"

    def test_nothing_may_follow_pagination(self):
        with pytest.raises(QueryPipelineError) as excinfo:
            PipelineBuilder().add_step(LateStep()).build()
        assert excinfo.value.step_name == "pagination"

    def test_skip_step(self):
        pipeline = PipelineBuilder().skip_step("search").build()
        assert "search" not in pipeline.get_step_names()


class SampleGrid(DataGrid):
    entity_key = "sample"


class OtherSampleGrid(DataGrid):
    entity_key = "sample"


class TestGridRegistry:
    def test_register_and_get(self):
        registry = GridRegistry()
        registry.register(SampleGrid)
        assert registry.get("sample") is SampleGrid
        assert registry.all() == ["sample"]
        assert isinstance(registry.get_grid("sample"), SampleGrid)

    def test_reregistering_same_class_is_allowed(self):
        registry = GridRegistry()
        registry.register(SampleGrid)
        registry.register(SampleGrid)
        assert registry.all() == ["sample"]

    def test_conflicting_entity_key(self):
        registry = GridRegistry()
        registry.register(SampleGrid)
        with pytest.raises(GridAlreadyRegisteredError):
            registry.register(OtherSampleGrid)

    def test_unknown_grid(self):
        with pytest.raises(UnknownGridError):
            GridRegistry().get("nope")

    def test_missing_entity_key(self):
        class Anonymous(DataGrid):
            pass

        with pytest.raises(DefinitionError):
            GridRegistry().register(Anonymous)
        with pytest.raises(DefinitionError):
            Anonymous()
