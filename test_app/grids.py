from datagrid.dsl import BulkAction, Column, ConfirmationView, Filter, Header, RowAction
from datagrid.grids import DataGrid, SortableField
from datagrid.registry import register_grid

from .models import Member, Team


def archive_member(member):
    member.status = "archived"
    member.save(update_fields=["status"])
    return member.pk


def archive_members(queryset):
    return queryset.update(status="archived")


def team_options():
    return {team.pk: team.name for team in Team.objects.order_by("name")}


@register_grid
class MemberGrid(DataGrid):
    entity_key = "members"
    model = Member
    sortable_fields = [SortableField("salary", default_direction="desc")]
    default_per_page = 15
    row_click_action = "view"

    def headers(self):
        return [
            Column.make("name").sortable().searchable(),
            Column.make("email").searchable(),
            Column.make("team.name", "Team").sortable().searchable(),
            Column.make("status").render_as("badge"),
            Column.make("bio").render_as("safe_html"),
            Column.make("salary").render_as("currency").hidden(
                lambda user: not (user and user.is_staff)
            ),
            Header.make("Joined").sortable("joined_on").show_in_viewports_only("md", "lg"),
            Column.make("created_at", "Created").sortable().render_as("datetime"),
        ]

    def filters(self):
        return [
            Filter.make("status").options(dict(Member.STATUS_CHOICES)),
            Filter.make("roles").multiselect().field("status"),
            Filter.make("has_email").boolean().field("email").map_values(
                {"1": "not_null", "0": "null"}
            ),
            Filter.make("is_admin").boolean(),
            Filter.make("team", "Team").relationship("team", "id").options(team_options),
            Filter.make("tag").relationship("tags", "name"),
            Filter.make("created_at").date_range(),
            Filter.make("joined_on").date_range(),
        ]

    def row_actions(self):
        return [
            RowAction.make("view").modal("members.detail", {"mode": "read"}),
            RowAction.make("edit").route(lambda member: f"/members/{member.pk}/edit/"),
            RowAction.make("archive")
            .handle(archive_member)
            .confirm(lambda member: f"Archive {member.name}?")
            .visible_when(lambda member: member.status != "archived"),
            RowAction.make("delete")
            .confirm(ConfirmationView("members.confirm-delete"))
            .permission_required("test_app.delete_member")
            .handle(lambda member: member.delete()),
        ]

    def bulk_actions(self):
        return [
            BulkAction.make("archive").handle(archive_members).confirm("Archive selected members?"),
            BulkAction.make("export").handle(lambda queryset: list(queryset.values_list("pk", flat=True))),
        ]


@register_grid
class CompactMemberGrid(DataGrid):
    entity_key = "members_compact"
    model = Member
    searchable_fields = ["name", "team.name"]
    filterable_fields = {
        "status": {"options": dict(Member.STATUS_CHOICES)},
        "has_email": {
            "type": "boolean",
            "field_mapping": "email",
            "value_mapping": {"1": "not_null", "0": "null"},
        },
        "created_at": {"type": "date_range", "label": "Created"},
        "team": {"relationship": ("team", "id"), "label": "Team"},
    }
    sortable_fields = ["name"]
    default_sort = ("name", "asc")

    def headers(self):
        return [Column.make("name"), Column.make("status")]
