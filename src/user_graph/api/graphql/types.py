"""GraphQL types."""

from user_graph.api.graphql import resolvers
from user_graph.graph import (
    Argument,
    ListField,
    ObjectField,
    ScalarField,
    ScalarKind,
    TypeRegistry,
)

ROOT_QUERY = "RootQueryType"


def user_fields() -> dict:
    return {
        "id": ScalarField(ScalarKind.STRING),
        "firstName": ScalarField(ScalarKind.STRING),
        "age": ScalarField(ScalarKind.INT),
        "company": ObjectField(
            "Company",
            resolve=resolvers.user_company,
            description="Company the user works for.",
        ),
    }


def company_fields() -> dict:
    return {
        "id": ScalarField(ScalarKind.STRING),
        "name": ScalarField(ScalarKind.STRING),
        "description": ScalarField(ScalarKind.STRING),
        "users": ListField(
            "User",
            resolve=resolvers.company_users,
            description="Users working for the company.",
        ),
    }


def root_query_fields() -> dict:
    by_id = {"id": Argument(ScalarKind.STRING, required=True)}
    return {
        "user": ObjectField(
            "User",
            resolve=resolvers.user,
            args=by_id,
            description="Find a user by ID.",
        ),
        "company": ObjectField(
            "Company",
            resolve=resolvers.company,
            args=by_id,
            description="Find a company by ID.",
        ),
    }


def build_registry() -> TypeRegistry:
    """Register User, Company and the root query, then freeze."""
    registry = TypeRegistry(query_type=ROOT_QUERY)
    registry.register("User", user_fields, description="A user of the application.")
    registry.register("Company", company_fields, description="A company users work for.")
    registry.register(ROOT_QUERY, root_query_fields)
    return registry.freeze()
