"""Grid query definitions."""

import graphene

from .inputs import GridRowsInput
from .services import resolve_grid_rows
from .types import GridRowsType


class GridQuery(graphene.ObjectType):
    gridRows = graphene.Field(GridRowsType, input=GridRowsInput(required=True))

    def resolve_gridRows(self, info, input):
        return resolve_grid_rows(info.context, input)
