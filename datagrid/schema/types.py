"""GraphQL types for data grids."""

import graphene


class GridPageInfoType(graphene.ObjectType):
    totalCount = graphene.Int(required=True)
    pageCount = graphene.Int(required=True)
    currentPage = graphene.Int(required=True)
    perPage = graphene.Int(required=True)
    fromItem = graphene.Int(required=True)
    toItem = graphene.Int(required=True)
    hasNextPage = graphene.Boolean(required=True)
    hasPreviousPage = graphene.Boolean(required=True)


class GridRowsType(graphene.ObjectType):
    pageInfo = graphene.Field(GridPageInfoType, required=True)
    items = graphene.JSONString(required=True)
    definition = graphene.JSONString(required=True)
    state = graphene.JSONString(required=True)
    activeFilters = graphene.JSONString()
    events = graphene.JSONString()
    shareUrl = graphene.String()


class GridActionResultType(graphene.ObjectType):
    ok = graphene.Boolean(required=True)
    status = graphene.String(required=True)
    redirectUrl = graphene.String()
    confirmation = graphene.JSONString()
    events = graphene.JSONString()


class ClearGridPreferencesResultType(graphene.ObjectType):
    ok = graphene.Boolean(required=True)
