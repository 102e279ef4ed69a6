"""
Integration tests for the grid controller.
"""

import json
from datetime import datetime, timezone as dt_timezone
from unittest import mock
from urllib.parse import parse_qs, urlsplit

import pytest
from django.core.serializers.json import DjangoJSONEncoder

from datagrid.controller import GridController
from datagrid.controller.actions import (
    STATUS_CONFIRM,
    STATUS_EXECUTED,
    STATUS_MODAL,
    STATUS_NOOP,
    STATUS_REDIRECT,
)
from datagrid.controller.signals import (
    ACTION_CONFIRMED,
    CLEAN_URL,
    CLOSE_MODAL,
    OPEN_MODAL,
    SCROLL_TO_TOP,
)
from datagrid.dsl import Column, RowAction
from datagrid.exceptions import UnknownActionError
from datagrid.grids import DataGrid
from test_app.grids import MemberGrid
from test_app.models import Member

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


@pytest.fixture
def controller(make_request, members):
    request = make_request()
    return GridController(MemberGrid(request.user), request)


def _names(controller):
    return [row.name for row in controller.rows]


class DirectoryGrid(DataGrid):
    entity_key = "directory"
    model = Member

    def headers(self):
        return [
            Column.make("name").searchable(),
            Column.make("email").searchable(),
            Column.make("created_at").sortable(),
        ]


class TestMount:
    """Initial state from query parameters and saved preferences."""

    def test_mount_without_params(self, controller):
        reconciled = controller.mount({})
        assert reconciled.clean_url is False
        assert controller.state.per_page == 15
        assert CLEAN_URL not in controller.signals.names()

    def test_mount_with_params_requests_clean_url(self, controller):
        controller.mount({"search": "bob", "per_page": "5"})
        assert _names(controller) == ["Bob"]
        clean = [s for s in controller.signals.pending if s.name == CLEAN_URL]
        assert clean[0].payload == {"params": ["per_page", "search"]}
        assert clean[0].event_name == "datagrid:clean-url:members"

    def test_mount_restores_saved_preferences(self, make_request, members):
        request = make_request()
        first = GridController(MemberGrid(), request)
        first.mount({})
        first.sort_by("name")
        first.sort_by("name")

        second = GridController(MemberGrid(), make_request(session=request.session))
        second.mount({})
        assert (second.state.sort_by, second.state.sort_direction) == ("name", "desc")
        assert _names(second)[0] == "Eve"

    def test_invalid_params_still_request_clean_url(self, controller):
        reconciled = controller.mount({"per_page": "-4", "direction": "up"})
        assert reconciled.clean_url is True
        assert controller.state.per_page == 15
        clean = [s for s in controller.signals.pending if s.name == CLEAN_URL]
        assert clean[0].payload == {"params": ["direction", "per_page"]}


class TestUnusableSavedFilters:
    """Filter values the database rejects never break later mounts."""

    @pytest.mark.parametrize(
        "params",
        [
            {"filters[created_at][from]": "2024-13-45"},
            {"filters[team]": "abc"},
        ],
    )
    def test_bad_value_is_survivable_after_remount(self, make_request, members, params):
        request = make_request()
        first = GridController(MemberGrid(), request)
        first.mount(params)
        assert len(_names(first)) == 5

        second = GridController(MemberGrid(), make_request(session=request.session))
        second.mount({})
        assert second.state.filters == first.state.filters
        assert len(_names(second)) == 5

    def test_bad_value_in_set_filter(self, controller):
        controller.mount({})
        controller.set_filter("team", "abc")
        assert len(_names(controller)) == 5


class TestStateMutations:
    """Every mutation resets the page, persists and scrolls to top."""

    def test_search_resets_page_and_persists(self, controller):
        controller.mount({})
        controller.set_per_page(2)
        controller.goto_page(2)
        controller.signals.drain()

        controller.set_search("  o ")
        assert controller.state.page == 1
        assert controller.state.search == "o"
        assert controller.request.session["datagrid.members"]["search"] == "o"
        assert SCROLL_TO_TOP in controller.signals.names()

    def test_goto_page_is_not_persisted(self, controller):
        controller.mount({})
        controller.set_per_page(2)
        controller.goto_page(3)
        assert _names(controller) == ["Eve"]
        assert "page" not in controller.request.session["datagrid.members"]

    def test_next_and_previous_page(self, controller):
        controller.mount({})
        controller.set_per_page(2)
        controller.next_page()
        assert controller.result().page == 2
        controller.next_page()
        controller.next_page()
        assert controller.result().page == 3
        controller.previous_page()
        assert controller.result().page == 2

    def test_sort_toggle(self, controller):
        controller.mount({})
        controller.sort_by("name")
        assert (controller.state.sort_by, controller.state.sort_direction) == ("name", "asc")
        controller.sort_by("name")
        assert controller.state.sort_direction == "desc"
        controller.sort_by("created_at")
        assert (controller.state.sort_by, controller.state.sort_direction) == ("created_at", "asc")

    def test_sort_uses_field_default_direction(self, controller):
        controller.mount({})
        controller.sort_by("salary")
        assert controller.state.sort_direction == "desc"
        assert _names(controller)[0] == "Eve"

    def test_set_per_page_is_bounded(self, controller):
        controller.mount({})
        controller.set_per_page(10_000)
        assert controller.state.per_page == 200
        controller.set_per_page(0)
        assert controller.state.per_page == 200

    def test_filters(self, controller):
        controller.mount({})
        controller.set_filter("status", "active")
        controller.set_filter("unknown", "x")
        assert controller.state.filters == {"status": "active"}
        assert _names(controller) == ["Alice", "Dave", "Eve"]

        controller.set_filter("status", "all")
        assert controller.state.filters == {}

        controller.set_filter("is_admin", "1")
        controller.set_filter("roles", ["active"])
        controller.remove_filter("is_admin")
        assert controller.state.filters == {"roles": ["active"]}
        controller.clear_filters()
        assert controller.state.filters == {}
        assert controller.request.session["datagrid.members"]["filters"] == {}

    def test_load_more_grows_window_until_mutation(self, controller, settings):
        settings.DATAGRID = {"rendering_settings": {"incremental_window": 2}}
        request = controller.request
        controller = GridController(MemberGrid(), request)
        controller.mount({})
        assert len(controller.visible_row_slice) == 2
        assert controller.has_more_rows
        controller.load_more()
        assert len(controller.visible_row_slice) == 4
        controller.set_search("")
        assert controller.visible_rows == 2

    def test_clear_preferences(self, controller):
        controller.mount({"search": "bob"})
        controller.clear_preferences()
        assert controller.state.search == ""
        assert "datagrid.members" not in controller.request.session

    def test_result_is_memoized_within_a_pass(self, controller):
        controller.mount({})
        with mock.patch.object(controller.pipeline, "run", wraps=controller.pipeline.run) as run:
            controller.result()
            controller.result()
            controller.to_view()
            assert run.call_count == 1
            controller.end_render_pass()
            controller.result()
            assert run.call_count == 2


class TestActiveFilters:
    def test_value_labels(self, controller, members):
        controller.mount({})
        controller.set_filter("status", "active")
        controller.set_filter("team", members["Alice"].team.pk)
        controller.set_filter("has_email", "1")
        controller.set_filter("created_at", {"from": "2024-01-01", "to": "2024-02-01"})
        controller.set_filter("joined_on", {"from": "2024-03-01"})
        controller.set_filter("roles", {"not": ["archived", "invited"]})

        labels = {chip["key"]: chip["value_label"] for chip in controller.active_filters()}
        assert labels == {
            "status": "Active",
            "team": "Core",
            "has_email": "Yes",
            "created_at": "2024-01-01 - 2024-02-01",
            "joined_on": "From 2024-03-01",
            "roles": "Not archived, invited",
        }

    def test_upper_bound_only(self, controller):
        controller.mount({})
        controller.set_filter("created_at", {"to": "2024-02-01"})
        assert controller.active_filters()[0]["value_label"] == "To 2024-02-01"


class TestRowActions:
    """Row action dispatch with confirmations and modals."""

    def test_confirmation_is_required_first(self, controller, members):
        bob = members["Bob"]
        result = controller.execute_action("archive", bob.pk)
        assert result.status == STATUS_CONFIRM
        assert result.confirmation == {
            "type": "message",
            "message": "Archive Bob?",
            "title": "Archive",
        }
        bob.refresh_from_db()
        assert bob.status == "invited"

    def test_confirmed_action_executes(self, controller, members):
        bob = members["Bob"]
        result = controller.execute_action("archive", bob.pk, confirmed=True)
        assert result.status == STATUS_EXECUTED
        assert result.value == bob.pk
        bob.refresh_from_db()
        assert bob.status == "archived"

    def test_row_predicate_hides_action(self, controller, members):
        carol = members["Carol"]
        assert "archive" not in [a.key for a in controller.row_actions_for(carol)]
        assert controller.execute_action("archive", carol.pk, confirmed=True).status == STATUS_NOOP

    def test_route_action(self, controller, members):
        alice = members["Alice"]
        result = controller.execute_action("edit", alice.pk)
        assert result.status == STATUS_REDIRECT
        assert result.redirect_url == f"/members/{alice.pk}/edit/"

    def test_modal_action_emits_open_modal(self, controller, members):
        alice = members["Alice"]
        result = controller.execute_action("view", alice.pk)
        assert result.status == STATUS_MODAL
        signal = [s for s in controller.signals.pending if s.name == OPEN_MODAL][-1]
        assert signal.payload == {
            "view_path": "members.detail",
            "view_type": "modal",
            "view_props": {"mode": "read", "id": str(alice.pk)},
            "view_title": "View",
            "datagrid_id": "members",
        }

    def test_permission_gated_action(self, make_request, members, staff_user):
        guest = GridController(MemberGrid(), make_request())
        with pytest.raises(UnknownActionError):
            guest.execute_action("delete", members["Dave"].pk)

        request = make_request(user=staff_user)
        staff = GridController(MemberGrid(staff_user), request)
        confirmation = staff.get_action_confirmation("delete", members["Dave"].pk)
        assert confirmation["type"] == "view"
        assert confirmation["view"] == "members.confirm-delete"

    def test_missing_row_is_noop(self, controller):
        assert controller.execute_action("edit", 999999).status == STATUS_NOOP

    def test_on_action_confirmed(self, controller, members):
        bob = members["Bob"]
        controller.signals.drain()
        result = controller.on_action_confirmed(
            {"action_key": "archive", "target_ids": [bob.pk], "is_bulk": False}
        )
        assert result.status == STATUS_EXECUTED
        assert controller.signals.names()[:2] == [ACTION_CONFIRMED, CLOSE_MODAL]
        bob.refresh_from_db()
        assert bob.status == "archived"


class TestBulkActions:
    def test_bulk_confirm_then_execute(self, controller, members):
        controller.mount({})
        controller.toggle_row(members["Alice"].pk)
        controller.toggle_row(members["Bob"].pk)

        pending = controller.execute_bulk_action("archive")
        assert pending.status == STATUS_CONFIRM
        assert pending.confirmation["message"] == "Archive selected members?"

        result = controller.execute_bulk_action("archive", confirmed=True)
        assert result.status == STATUS_EXECUTED
        assert result.value == 2
        assert controller.selection.ids == []
        assert Member.objects.filter(status="archived").count() == 3

    def test_bulk_without_selection_is_noop(self, controller):
        assert controller.execute_bulk_action("export").status == STATUS_NOOP

    def test_select_all_on_page(self, controller):
        controller.mount({})
        controller.set_per_page(2)
        controller.toggle_select_all()
        assert controller.is_all_selected
        assert len(controller.selection.ids) == 2
        controller.toggle_select_all()
        assert controller.selection.ids == []

    def test_bulk_confirmed_through_payload(self, controller, members):
        ids = [str(members["Alice"].pk), str(members["Eve"].pk)]
        for row_id in ids:
            controller.toggle_row(row_id)
        result = controller.on_action_confirmed(
            {"action_key": "export", "target_ids": ids, "is_bulk": True}
        )
        assert sorted(result.value) == sorted(int(i) for i in ids)


class InspectOnClickGrid(MemberGrid):
    row_click_action = "inspect"

    def row_actions(self):
        return [
            RowAction.make("inspect")
            .modal("members.detail")
            .visible_when(lambda member: member.status == "archived"),
        ]


class TestRowClick:
    def test_row_click_opens_modal(self, controller, members):
        controller.mount({})
        assert controller.row_click_opens_modal is True
        result = controller.handle_row_click(members["Eve"].pk)
        assert result.status == STATUS_MODAL

    def test_modal_flag_does_not_depend_on_first_row(self, make_request, members):
        request = make_request()
        controller = GridController(InspectOnClickGrid(), request)
        controller.mount({})
        assert controller.rows[0].status != "archived"
        assert controller.row_click_opens_modal is True

    def test_modal_flag_with_empty_page(self, controller, members):
        controller.mount({"search": "nobody-matches-this"})
        assert controller.rows == []
        assert controller.row_click_opens_modal is True

    def test_modal_flag_is_memoized(self, controller, members):
        controller.mount({})
        assert controller.row_click_opens_modal is True
        hits = controller.memo.hits
        assert controller.row_click_opens_modal is True
        assert controller.memo.hits == hits + 1

    def test_no_row_click_action(self, make_request, members):
        request = make_request()
        controller = GridController(DirectoryGrid(), request)
        controller.mount({})
        assert controller.row_click_opens_modal is False


class TestOutput:
    """Share URL and view payload."""

    def test_share_url(self, controller):
        controller.mount({})
        controller.set_search("bob")
        controller.sort_by("name")
        controller.set_filter("roles", ["active", "invited"])
        controller.set_filter("created_at", {"from": "2024-01-01"})

        url = controller.share_url()
        parts = urlsplit(url)
        query = parse_qs(parts.query)
        assert parts.path == "/members/"
        assert query["search"] == ["bob"]
        assert query["sort"] == ["name"]
        assert query["direction"] == ["asc"]
        assert query["filters[roles][]"] == ["active", "invited"]
        assert query["filters[created_at][from]"] == ["2024-01-01"]

    def test_share_url_roundtrips_through_mount(self, controller, make_request, members):
        controller.mount({})
        controller.set_search("a")
        controller.set_filter("roles", ["active"])
        request = make_request(path=controller.share_url())
        restored = GridController(MemberGrid(), make_request())
        restored.mount(request.GET)
        assert restored.state.search == "a"
        assert restored.state.filters == {"roles": ["active"]}

    def test_aliased_share_url(self, make_request, members):
        controller = GridController(MemberGrid(), make_request(), alias="m")
        controller.mount({})
        controller.set_search("eve")
        assert "m_search=eve" in controller.share_url("/x/")

    def test_to_view_is_json_serializable(self, controller):
        controller.mount({})
        view = controller.to_view()
        json.dumps(view, cls=DjangoJSONEncoder)
        first = view["rows"][0]
        cells = {cell["key"]: cell for cell in first["cells"]}
        assert cells["bio"]["value"] == "<p>Alice bio</p>"
        assert cells["bio"]["component"] == "datagrid.cells.safe-html"
        assert cells["created_at"]["value"] == "2024-01-10 09:30"
        assert "salary" not in cells
        assert view["page_info"]["total"] == 5
        filters = {f["key"]: f for f in view["definition"]["filters"]}
        assert filters["status"]["component"] == "datagrid.filters.select"
        assert filters["created_at"]["component"] == "datagrid.filters.date-range"

    def test_missing_relation_renders_placeholder(self, controller, members):
        controller.mount({})
        rendered = controller.render_rows([members["Dave"]])
        cells = {cell["key"]: cell["value"] for cell in rendered[0]["cells"]}
        assert cells["team.name"] == "-"
        assert cells["email"] == "dave@example.com"

    def test_staff_sees_restricted_column(self, make_request, members, staff_user):
        request = make_request(user=staff_user)
        controller = GridController(MemberGrid(staff_user), request)
        controller.mount({})
        rendered = controller.render_rows([members["Bob"]])
        cells = {cell["key"]: cell["value"] for cell in rendered[0]["cells"]}
        assert cells["salary"] == "2,000.00"


class TestDirectoryScenario:
    """Search and sort over a two-row directory."""

    @pytest.fixture
    def directory(self, db):
        Member.objects.create(
            name="Alice",
            email="alice@example.com",
            created_at=datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
        )
        Member.objects.create(
            name="Bob",
            email="bob@example.com",
            created_at=datetime(2024, 6, 1, tzinfo=dt_timezone.utc),
        )

    def test_search_yields_single_row(self, make_request, directory):
        controller = GridController(DirectoryGrid(), make_request())
        controller.mount({"search": "alice"})
        assert _names(controller) == ["Alice"]

    def test_sort_newest_first(self, make_request, directory):
        controller = GridController(DirectoryGrid(), make_request())
        controller.mount({"sort": "created_at", "direction": "desc"})
        assert _names(controller) == ["Bob", "Alice"]
