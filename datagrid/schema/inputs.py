"""GraphQL input types for data grids."""

import graphene


class GridRowsInput(graphene.InputObjectType):
    entity = graphene.String(required=True)
    search = graphene.String()
    sort = graphene.String()
    direction = graphene.String()
    perPage = graphene.Int()
    page = graphene.Int()
    filters = graphene.JSONString()


class ExecuteGridActionInput(graphene.InputObjectType):
    entity = graphene.String(required=True)
    actionKey = graphene.String(required=True)
    rowIds = graphene.List(graphene.ID, required=True)
    isBulk = graphene.Boolean()
    confirmed = graphene.Boolean()
