"""Graph resolution: type registry, query trees and executor."""

from user_graph.graph.executor import GraphExecutor
from user_graph.graph.query import FieldSelection, Query, build_query
from user_graph.graph.registry import (
    Argument,
    EntityType,
    FieldSpec,
    ListField,
    ObjectField,
    ScalarField,
    ScalarKind,
    TypeRegistry,
)
from user_graph.graph.typesystem import to_graphql_schema

__all__ = [
    "Argument",
    "EntityType",
    "FieldSelection",
    "FieldSpec",
    "GraphExecutor",
    "ListField",
    "ObjectField",
    "Query",
    "ScalarField",
    "ScalarKind",
    "TypeRegistry",
    "build_query",
    "to_graphql_schema",
]
