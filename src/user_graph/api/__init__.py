"""HTTP API."""

from user_graph.api.graphql import graphql_router

__all__ = ["graphql_router"]
