"""
Unit tests for the render-type registries.
"""

import pytest

from datagrid.constants import ColumnRenderType, FilterType
from datagrid.exceptions import RenderTypeAlreadyRegisteredError, UnregisteredRenderTypeError
from datagrid.rendering.registry import CellComponentRegistry, FilterComponentRegistry

pytestmark = pytest.mark.unit


class TestCellRegistry:
    def test_seeded_with_every_render_type(self):
        registry = CellComponentRegistry()
        for render_type in ColumnRenderType:
            assert registry.has_component(render_type)
        assert registry.get_component("safe_html") == "datagrid.cells.safe-html"
        assert len(registry) == len(ColumnRenderType)

    def test_unknown_type_fails_fast(self):
        with pytest.raises(UnregisteredRenderTypeError) as excinfo:
            CellComponentRegistry().get_component("sparkline")
        assert excinfo.value.render_type == "sparkline"
        assert excinfo.value.registry_name == "cell"

    def test_registration_cannot_overwrite(self):
        registry = CellComponentRegistry()
        with pytest.raises(RenderTypeAlreadyRegisteredError):
            registry.register(ColumnRenderType.TEXT, "evil.component")
        assert registry.get_component("text") == "datagrid.cells.text"

    def test_new_type_can_be_registered_once(self):
        registry = CellComponentRegistry()
        registry.register("sparkline", "app.cells.sparkline")
        assert registry.get_component("sparkline") == "app.cells.sparkline"
        assert "sparkline" in registry.all()

    def test_all_returns_copy(self):
        registry = CellComponentRegistry()
        registry.all()["text"] = "changed"
        assert registry.get_component("text") == "datagrid.cells.text"


class TestFilterRegistry:
    def test_seeded_with_every_filter_type(self):
        registry = FilterComponentRegistry()
        assert set(registry.all()) == {t.value for t in FilterType}
        assert registry.get_component(FilterType.DATE_RANGE) == "datagrid.filters.date-range"

    def test_custom_seed(self):
        registry = FilterComponentRegistry({"slider": "app.filters.slider"})
        assert registry.all() == {"slider": "app.filters.slider"}
