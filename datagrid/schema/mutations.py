"""Grid mutation definitions."""

import graphene

from .inputs import ExecuteGridActionInput
from .services import clear_grid_preferences, execute_grid_action
from .types import ClearGridPreferencesResultType, GridActionResultType


class ExecuteGridActionMutation(graphene.Mutation):
    class Arguments:
        input = ExecuteGridActionInput(required=True)

    Output = GridActionResultType

    def mutate(self, info, input):
        return execute_grid_action(info.context, input)


class GridMutations(graphene.ObjectType):
    executeGridAction = ExecuteGridActionMutation.Field()
    clearGridPreferences = graphene.Field(
        ClearGridPreferencesResultType,
        entity=graphene.String(required=True),
    )

    def resolve_clearGridPreferences(self, info, entity: str):
        return clear_grid_preferences(info.context, entity)
