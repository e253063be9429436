"""GraphQL API."""

from user_graph.api.graphql.schema import executor, graphql_router, registry, schema
from user_graph.api.graphql.types import build_registry

__all__ = [
    "schema",
    "registry",
    "executor",
    "graphql_router",
    "build_registry",
]
