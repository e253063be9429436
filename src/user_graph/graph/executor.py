"""Graph executor.

Resolves a Query against the type registry: depth first, parent before
children, siblings gathered concurrently. A failing field nulls its own
subtree and is reported as an error at its path; the rest of the tree still
resolves.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from graphql import ExecutionResult, GraphQLError, GraphQLSchema, execute_sync
from graphql.pyutils import Path

from user_graph.errors import ArgumentCoercionFailure, BackendNotFound, MalformedQuery
from user_graph.graph.query import TYPENAME, FieldSelection, Query
from user_graph.graph.registry import (
    Argument,
    EntityType,
    FieldSpec,
    ListField,
    ObjectField,
    Resolver,
    ScalarField,
    TypeRegistry,
)
from user_graph.graph.typesystem import to_graphql_schema

logger = logging.getLogger("graph_executor")


def attribute_resolver(name: str) -> Resolver:
    """Resolver reading ``name`` from a mapping or object parent."""

    async def resolve(parent: Any, args: dict[str, Any]) -> Any:
        if isinstance(parent, Mapping):
            return parent.get(name)
        return getattr(parent, name, None)

    return resolve


def coerce_arguments(declared: Mapping[str, Argument], given: dict[str, Any]) -> dict[str, Any]:
    """Coerce given argument values to their declared kinds."""
    args = {}
    for name, argument in declared.items():
        value = given.get(name, argument.default)
        if value is None:
            if argument.required:
                raise ArgumentCoercionFailure(name, value, f"{argument.kind.value}!")
            args[name] = None
        else:
            args[name] = argument.kind.coerce_input(name, value)
    return args


class GraphExecutor:
    """Executes Query trees against a frozen TypeRegistry."""

    def __init__(self, registry: TypeRegistry, schema: Optional[GraphQLSchema] = None):
        self.registry = registry
        self._schema = schema

    @property
    def schema(self) -> GraphQLSchema:
        """graphql-core mirror of the registry, used for introspection."""
        if self._schema is None:
            self._schema = to_graphql_schema(self.registry)
        return self._schema

    async def execute(self, query: Query) -> ExecutionResult:
        """Resolve every requested root field into one result tree."""
        if query.introspection:
            return execute_sync(
                self.schema,
                query.document,
                variable_values=query.variables,
                operation_name=query.operation_name,
            )

        root = self.registry.root
        self.check(root, query.selections)

        errors: list[GraphQLError] = []
        data = await self._resolve_object(root, None, query.selections, None, errors)
        if errors:
            logger.info(f"Query resolved with {len(errors)} field error(s)")
        return ExecutionResult(data=data, errors=errors or None)

    def check(self, entity: EntityType, selections: list[FieldSelection]) -> None:
        """Reject selections that do not fit the registered types."""
        for selection in selections:
            if selection.name == TYPENAME:
                continue
            spec = entity.field(selection.name)
            if spec is None:
                raise MalformedQuery(
                    [
                        GraphQLError(
                            f"Cannot query field '{selection.name}' on type '{entity.name}'.",
                            selection.nodes or None,
                        )
                    ]
                )
            if isinstance(spec, ScalarField):
                if selection.selections:
                    raise MalformedQuery(
                        [
                            GraphQLError(
                                f"Field '{selection.name}' must not have a selection"
                                f" since type '{spec.kind.value}' has no subfields.",
                                selection.nodes or None,
                            )
                        ]
                    )
                continue
            if not selection.selections:
                raise MalformedQuery(
                    [
                        GraphQLError(
                            f"Field '{selection.name}' of type '{spec.target}'"
                            " must have a selection of subfields.",
                            selection.nodes or None,
                        )
                    ]
                )
            self.check(self.registry.lookup(spec.target), selection.selections)

    async def _resolve_object(
        self,
        entity: EntityType,
        parent: Any,
        selections: list[FieldSelection],
        path: Optional[Path],
        errors: list[GraphQLError],
    ) -> dict[str, Any]:
        keys = [selection.response_key for selection in selections]
        values = await asyncio.gather(
            *(
                self._resolve_field(
                    entity,
                    parent,
                    selection,
                    Path(path, selection.response_key, entity.name),
                    errors,
                )
                for selection in selections
            )
        )
        return dict(zip(keys, values))

    async def _resolve_field(
        self,
        entity: EntityType,
        parent: Any,
        selection: FieldSelection,
        path: Path,
        errors: list[GraphQLError],
    ) -> Any:
        if selection.name == TYPENAME:
            return entity.name

        spec = entity.fields[selection.name]
        try:
            args = coerce_arguments(spec.args, selection.arguments)
        except ArgumentCoercionFailure as e:
            logger.warning(f"{entity.name}.{selection.name}: {e}")
            errors.append(self._located_error(e, selection, path))
            return None

        resolve = spec.resolve or attribute_resolver(selection.name)
        try:
            value = await resolve(parent, args)
        except BackendNotFound:
            return None
        except Exception as e:
            logger.warning(f"{entity.name}.{selection.name} failed at {path.as_list()}: {e}")
            errors.append(self._located_error(e, selection, path))
            return None

        return await self._complete(spec, value, selection, path, errors)

    async def _complete(
        self,
        spec: FieldSpec,
        value: Any,
        selection: FieldSelection,
        path: Path,
        errors: list[GraphQLError],
    ) -> Any:
        if value is None:
            return None

        if isinstance(spec, ScalarField):
            try:
                return spec.kind.serialize(value)
            except TypeError as e:
                errors.append(self._located_error(e, selection, path))
                return None

        if isinstance(spec, ObjectField):
            target = self.registry.lookup(spec.target)
            return await self._resolve_object(target, value, selection.selections, path, errors)

        if isinstance(spec, ListField):
            target = self.registry.lookup(spec.target)
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                errors.append(
                    self._located_error(
                        TypeError(f"Expected a list for field '{selection.name}'."),
                        selection,
                        path,
                    )
                )
                return None
            return list(
                await asyncio.gather(
                    *(
                        self._complete_item(target, item, selection, path.add_key(index), errors)
                        for index, item in enumerate(value)
                    )
                )
            )

        raise TypeError(f"Unsupported field spec: {spec!r}")

    async def _complete_item(
        self,
        target: EntityType,
        item: Any,
        selection: FieldSelection,
        path: Path,
        errors: list[GraphQLError],
    ) -> Optional[dict[str, Any]]:
        if item is None:
            return None
        return await self._resolve_object(target, item, selection.selections, path, errors)

    @staticmethod
    def _located_error(
        error: Exception, selection: FieldSelection, path: Path
    ) -> GraphQLError:
        return GraphQLError(
            str(error),
            selection.nodes or None,
            path=path.as_list(),
            original_error=error,
        )
