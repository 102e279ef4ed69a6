"""
Unit tests for extracting grid state from query parameters.
"""

import pytest
from django.http import QueryDict

from datagrid.preferences.reconciliation import QueryParamParser

pytestmark = pytest.mark.unit


class TestQueryParamParser:
    def test_empty_params(self):
        assert QueryParamParser().parse(None) == {}
        assert QueryParamParser().parse({}) == {}

    def test_scalar_params(self):
        parsed = QueryParamParser().parse(
            {"search": "foo", "sort": "name", "direction": "DESC", "per_page": "50", "page": "3"}
        )
        assert parsed == {
            "search": "foo",
            "sort": "name",
            "direction": "desc",
            "per_page": 50,
            "page": 3,
        }

    @pytest.mark.parametrize(
        "params",
        [
            {"direction": "sideways"},
            {"per_page": "0"},
            {"per_page": "-5"},
            {"page": "abc"},
            {"sort": ""},
        ],
    )
    def test_invalid_values_are_not_recognized(self, params):
        assert QueryParamParser().parse(params) == {}

    def test_nested_filters(self):
        parsed = QueryParamParser().parse({"filters": {"status": "active"}})
        assert parsed["filters"] == {"status": "active"}

    def test_flattened_filters_from_query_dict(self):
        params = QueryDict(
            "filters[status]=active"
            "&filters[roles][]=active&filters[roles][]=invited"
            "&filters[created_at][from]=2024-01-01&filters[created_at][to]=2024-02-01"
        )
        parsed = QueryParamParser().parse(params)
        assert parsed["filters"] == {
            "status": "active",
            "roles": ["active", "invited"],
            "created_at": {"from": "2024-01-01", "to": "2024-02-01"},
        }

    def test_alias_prefix(self):
        params = QueryDict("m_search=bob&search=ignored&m_filters[status]=active&m_per_page=5")
        parsed = QueryParamParser(alias="m").parse(params)
        assert parsed == {"search": "bob", "per_page": 5, "filters": {"status": "active"}}

    def test_unaliased_parser_ignores_prefixed_filters(self):
        parsed = QueryParamParser().parse(QueryDict("m_filters[status]=active"))
        assert "filters" not in parsed
