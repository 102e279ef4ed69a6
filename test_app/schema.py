import graphene

from datagrid.schema import GridMutations, GridQuery


class Query(GridQuery, graphene.ObjectType):
    pass


class Mutation(GridMutations, graphene.ObjectType):
    pass


schema = graphene.Schema(query=Query, mutation=Mutation)
