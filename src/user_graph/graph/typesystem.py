"""graphql-core schema built from the type registry.

Used for document validation and introspection.
Execution of data fields stays with GraphExecutor.
"""

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from user_graph.graph.registry import (
    Argument,
    FieldSpec,
    ListField,
    ObjectField,
    ScalarKind,
    TypeRegistry,
)

SCALARS = {
    ScalarKind.STRING: GraphQLString,
    ScalarKind.INT: GraphQLInt,
}


def to_graphql_schema(registry: TypeRegistry) -> GraphQLSchema:
    """Mirror the registry as a GraphQLSchema.

    Object types are created once per name and their fields are thunks, so
    circular references resolve the same way they do in the registry.
    """
    built: dict[str, GraphQLObjectType] = {}

    def object_type(name: str) -> GraphQLObjectType:
        if name not in built:
            entity = registry.lookup(name)
            built[name] = GraphQLObjectType(
                name,
                fields=lambda: {
                    field_name: graphql_field(spec)
                    for field_name, spec in entity.fields.items()
                },
                description=entity.description,
            )
        return built[name]

    def graphql_field(spec: FieldSpec) -> GraphQLField:
        if isinstance(spec, ObjectField):
            output = object_type(spec.target)
        elif isinstance(spec, ListField):
            output = GraphQLList(object_type(spec.target))
        else:
            output = SCALARS[spec.kind]
        return GraphQLField(
            output,
            args={name: graphql_argument(arg) for name, arg in spec.args.items()},
            description=spec.description,
        )

    query = object_type(registry.query_type)
    types = [object_type(name) for name in registry.names()]
    return GraphQLSchema(query=query, types=types)


def graphql_argument(argument: Argument) -> GraphQLArgument:
    arg_type = SCALARS[argument.kind]
    if argument.required:
        arg_type = GraphQLNonNull(arg_type)
    kwargs = {"description": argument.description}
    if argument.default is not None:
        kwargs["default_value"] = argument.default
    return GraphQLArgument(arg_type, **kwargs)

