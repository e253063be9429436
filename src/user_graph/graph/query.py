"""Query documents to Query trees."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from graphql import (
    DirectiveNode,
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLError,
    GraphQLSchema,
    InlineFragmentNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
    ValuesOfCorrectTypeRule,
    parse,
    print_ast,
    specified_rules,
    validate,
)
from graphql.pyutils import Undefined
from graphql.utilities import get_operation_ast, value_from_ast_untyped

from user_graph.errors import MalformedQuery

# Literal values are coerced per field at execution time, where a bad value
# nulls only that field.
VALIDATION_RULES = [rule for rule in specified_rules if rule is not ValuesOfCorrectTypeRule]

INTROSPECTION_FIELDS = frozenset({"__schema", "__type"})
TYPENAME = "__typename"


@dataclass
class FieldSelection:
    """One requested field with its arguments and sub-fields."""

    name: str
    alias: Optional[str] = None
    arguments: dict[str, Any] = field(default_factory=dict)
    selections: list["FieldSelection"] = field(default_factory=list)
    nodes: list[FieldNode] = field(default_factory=list)

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass
class Query:
    """Requested root fields of one query operation."""

    selections: list[FieldSelection]
    operation_name: Optional[str] = None
    document: Optional[DocumentNode] = None
    variables: dict[str, Any] = field(default_factory=dict)
    introspection: bool = False


def build_query(
    schema: GraphQLSchema,
    source: str,
    variables: Optional[dict[str, Any]] = None,
    operation_name: Optional[str] = None,
) -> Query:
    """Parse and validate a document, then select its operation.

    Raises MalformedQuery if the document cannot be executed at all.
    """
    try:
        document = parse(source)
    except GraphQLError as e:
        raise MalformedQuery([e]) from e

    errors = validate(schema, document, VALIDATION_RULES)
    if errors:
        raise MalformedQuery(errors)

    if variables is not None and not isinstance(variables, dict):
        raise MalformedQuery("Variables must be provided as an object.")

    operation = _select_operation(document, operation_name)
    if operation.operation != OperationType.QUERY:
        raise MalformedQuery(
            [
                GraphQLError(
                    f"Only query operations are supported, got {operation.operation.value}.",
                    operation,
                )
            ]
        )

    builder = QueryBuilder(document, _variable_values(operation, variables or {}))
    selections = builder.collect([operation.selection_set])

    root_names = {selection.name for selection in selections}
    introspection = bool(root_names & INTROSPECTION_FIELDS)
    if introspection and root_names - INTROSPECTION_FIELDS - {TYPENAME}:
        raise MalformedQuery("Introspection fields cannot be combined with data fields.")

    return Query(
        selections=selections,
        operation_name=operation.name.value if operation.name else None,
        document=document,
        variables=builder.variables,
        introspection=introspection,
    )


def _select_operation(
    document: DocumentNode, operation_name: Optional[str]
) -> OperationDefinitionNode:
    has_operations = any(
        isinstance(definition, OperationDefinitionNode) for definition in document.definitions
    )
    if not has_operations:
        raise MalformedQuery("Must provide an operation.")
    operation = get_operation_ast(document, operation_name)
    if operation is None:
        if operation_name:
            raise MalformedQuery(f"Unknown operation named '{operation_name}'.")
        raise MalformedQuery("Must provide operation name if query contains multiple operations.")
    return operation


def _variable_values(operation: OperationDefinitionNode, inputs: dict[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for definition in operation.variable_definitions or ():
        name = definition.variable.name.value
        if name in inputs:
            values[name] = inputs[name]
        elif definition.default_value is not None:
            values[name] = value_from_ast_untyped(definition.default_value)
        if isinstance(definition.type, NonNullTypeNode) and values.get(name) is None:
            raise MalformedQuery(
                [
                    GraphQLError(
                        f"Variable '${name}' of required type"
                        f" '{print_ast(definition.type)}' was not provided.",
                        definition,
                    )
                ]
            )
    return values


class QueryBuilder:
    """Expands fragments and directives into FieldSelection trees."""

    def __init__(self, document: DocumentNode, variables: dict[str, Any]):
        self.variables = variables
        self.fragments = {
            definition.name.value: definition
            for definition in document.definitions
            if isinstance(definition, FragmentDefinitionNode)
        }

    def collect(self, selection_sets: Iterable[SelectionSetNode]) -> list[FieldSelection]:
        """Merge selection sets into selections keyed by response key."""
        grouped: dict[str, list[FieldNode]] = {}
        for selection_set in selection_sets:
            self._group(selection_set, grouped, set())

        selections = []
        for nodes in grouped.values():
            first = nodes[0]
            sub_sets = [node.selection_set for node in nodes if node.selection_set]
            selections.append(
                FieldSelection(
                    name=first.name.value,
                    alias=first.alias.value if first.alias else None,
                    arguments=self._arguments(first),
                    selections=self.collect(sub_sets) if sub_sets else [],
                    nodes=nodes,
                )
            )
        return selections

    def _group(
        self,
        selection_set: SelectionSetNode,
        grouped: dict[str, list[FieldNode]],
        visited: set[str],
    ) -> None:
        for selection in selection_set.selections:
            if not self._included(selection.directives):
                continue
            if isinstance(selection, FieldNode):
                key = selection.alias.value if selection.alias else selection.name.value
                grouped.setdefault(key, []).append(selection)
            elif isinstance(selection, InlineFragmentNode):
                self._group(selection.selection_set, grouped, visited)
            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                fragment = self.fragments.get(name)
                if name in visited or fragment is None:
                    continue
                visited.add(name)
                self._group(fragment.selection_set, grouped, visited)

    def _arguments(self, node: FieldNode) -> dict[str, Any]:
        arguments = {}
        for argument in node.arguments or ():
            value = value_from_ast_untyped(argument.value, self.variables)
            if value is not Undefined:
                arguments[argument.name.value] = value
        return arguments

    def _included(self, directives: Optional[Iterable[DirectiveNode]]) -> bool:
        for directive in directives or ():
            name = directive.name.value
            if name not in ("skip", "include"):
                continue
            condition = None
            for argument in directive.arguments or ():
                if argument.name.value == "if":
                    condition = value_from_ast_untyped(argument.value, self.variables)
            if name == "skip" and condition is True:
                return False
            if name == "include" and condition is not True:
                return False
        return True
