"""
Unit tests for cell value resolution and preparation.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ObjectDoesNotExist

from datagrid.dsl import Column
from datagrid.exceptions import UnregisteredRenderTypeError
from datagrid.rendering.cells import CellRenderer, resolve_path
from datagrid.settings import GridSettings

pytestmark = pytest.mark.unit


class MissingRelation:
    @property
    def team(self):
        raise ObjectDoesNotExist("no team")


@pytest.fixture
def renderer():
    return CellRenderer(settings=GridSettings(currency_symbol="$"))


class TestResolvePath:
    def test_dict_and_attribute_paths(self):
        class Team:
            name = "Core"

        class Row:
            team = Team()

        assert resolve_path({"team": {"name": "Core"}}, "team.name") == "Core"
        assert resolve_path(Row(), "team.name") == "Core"

    def test_none_intermediate(self):
        assert resolve_path({"team": None}, "team.name") is None


class TestCellRenderer:
    def test_unregistered_type_fails_at_render_time(self, renderer):
        column = Column.make("x").render_as("sparkline")
        with pytest.raises(UnregisteredRenderTypeError):
            renderer.render(column, {"x": 1})

    def test_text_cell(self, renderer):
        cell = renderer.render(Column.make("name").css("font-bold").nowrap(), {"name": "Alice"})
        assert cell.component == "datagrid.cells.text"
        assert cell.value == "Alice"
        assert cell.css_class == "font-bold"
        assert cell.nowrap is True

    def test_formatter_and_accessor(self, renderer):
        column = (
            Column.make("full")
            .content(lambda row: f"{row['first']} {row['last']}")
            .format(lambda value, row: value.upper())
        )
        assert renderer.render(column, {"first": "a", "last": "b"}).value == "A B"

    def test_missing_relation_renders_placeholder(self, renderer):
        cell = renderer.render(Column.make("team.name"), MissingRelation())
        assert cell.value == "-"

    def test_null_value_renders_placeholder(self, renderer):
        assert renderer.render(Column.make("team.name"), {"team": None}).value == "-"

    def test_safe_html_is_sanitized(self, renderer):
        column = Column.make("bio").render_as("safe_html")
        cell = renderer.render(column, {"bio": '<p onclick="x()">Hi</p><script>x</script>'})
        assert cell.value == "<p>Hi</p>"
        assert cell.component == "datagrid.cells.safe-html"

    def test_currency(self, renderer):
        column = Column.make("salary").render_as("currency")
        assert renderer.render(column, {"salary": Decimal("1234.5")}).value == "$1,234.50"

    def test_date_and_boolean(self, renderer):
        assert renderer.render(
            Column.make("d").render_as("date"), {"d": date(2024, 3, 1)}
        ).value == "2024-03-01"
        assert renderer.render(Column.make("b").render_as("boolean"), {"b": None}).value is False
        assert renderer.render(Column.make("b").render_as("boolean"), {"b": 1}).value is True

    def test_render_row(self, renderer):
        cells = renderer.render_row([Column.make("a"), Column.make("b")], {"a": 1, "b": "x"})
        assert [c.to_dict()["value"] for c in cells] == [1, "x"]

    def test_callable_attributes_receive_raw_value(self, renderer):
        column = Column.make("status").render_as(
            "badge", color=lambda value: "green" if value == "active" else "grey", size="sm"
        )
        cell = renderer.render(column, {"status": "active"})
        assert cell.attributes == {"color": "green", "size": "sm"}
        assert renderer.render(column, {"status": "archived"}).attributes["color"] == "grey"
