"""Tests for query document parsing and validation."""

import pytest

from user_graph.api.graphql import schema
from user_graph.errors import MalformedQuery
from user_graph.graph import build_query


def shape(selections):
    """Selections as nested (response key, arguments, children) tuples."""
    return [
        (selection.response_key, selection.arguments, shape(selection.selections))
        for selection in selections
    ]


def test_simple_query():
    """Test a root field with arguments and sub-fields."""
    query = build_query(schema, '{ user(id: "23") { firstName age } }')

    assert shape(query.selections) == [
        ("user", {"id": "23"}, [("firstName", {}, []), ("age", {}, [])]),
    ]
    assert query.introspection is False


def test_nested_query_keeps_field_nodes():
    """Test selections carry their AST nodes for error locations."""
    query = build_query(schema, '{ company(id: "1") { users { firstName } } }')

    users = query.selections[0].selections[0]
    assert users.name == "users"
    assert users.nodes[0].loc is not None


def test_syntax_error():
    """Test unparsable documents are rejected."""
    with pytest.raises(MalformedQuery) as exc_info:
        build_query(schema, '{ user(id: "23") { firstName ')

    assert exc_info.value.errors[0].locations


def test_unknown_field():
    """Test fields missing from the schema are rejected."""
    with pytest.raises(MalformedQuery) as exc_info:
        build_query(schema, '{ user(id: "23") { salary } }')

    assert "salary" in exc_info.value.errors[0].message


def test_missing_sub_selection():
    """Test object fields need sub-fields."""
    with pytest.raises(MalformedQuery):
        build_query(schema, '{ user(id: "23") }')


def test_missing_required_argument():
    """Test root fields need their id argument."""
    with pytest.raises(MalformedQuery):
        build_query(schema, "{ user { firstName } }")


def test_literal_values_coerced_at_execution():
    """Test literal argument values are not type-checked during validation."""
    query = build_query(schema, "{ user(id: 23) { firstName } }")

    assert query.selections[0].arguments == {"id": 23}


def test_variables():
    """Test variables and variable defaults."""
    source = """
        query Find($id: String!, $other: String = "47") {
            user(id: $id) { firstName }
            second: user(id: $other) { firstName }
        }
    """
    query = build_query(schema, source, {"id": "23"})

    assert query.operation_name == "Find"
    assert query.variables == {"id": "23", "other": "47"}
    assert [selection.arguments for selection in query.selections] == [{"id": "23"}, {"id": "47"}]


def test_missing_required_variable():
    """Test a required variable without a value is rejected."""
    with pytest.raises(MalformedQuery) as exc_info:
        build_query(schema, "query ($id: String!) { user(id: $id) { firstName } }", {})

    assert "$id" in exc_info.value.errors[0].message


def test_variables_must_be_object():
    """Test non-object variables are rejected."""
    with pytest.raises(MalformedQuery):
        build_query(schema, '{ user(id: "23") { id } }', ["23"])


def test_aliases():
    """Test aliases become response keys."""
    query = build_query(
        schema,
        '{ bill: user(id: "23") { name: firstName } sam: user(id: "47") { firstName } }',
    )

    assert shape(query.selections) == [
        ("bill", {"id": "23"}, [("name", {}, [])]),
        ("sam", {"id": "47"}, [("firstName", {}, [])]),
    ]


def test_fragments_are_expanded_and_merged():
    """Test fragment spreads and inline fragments merge into one tree."""
    source = """
        query {
            user(id: "23") {
                ...UserParts
                ... on User { age }
                company { name }
                company { description }
            }
        }
        fragment UserParts on User {
            firstName
            age
        }
    """
    query = build_query(schema, source)

    assert shape(query.selections) == [
        (
            "user",
            {"id": "23"},
            [
                ("firstName", {}, []),
                ("age", {}, []),
                ("company", {}, [("name", {}, []), ("description", {}, [])]),
            ],
        )
    ]
    assert len(query.selections[0].selections[1].nodes) == 2


def test_skip_and_include():
    """Test @skip and @include with literals and variables."""
    source = """
        query ($withAge: Boolean!) {
            user(id: "23") {
                id @skip(if: true)
                firstName @include(if: true)
                age @include(if: $withAge)
            }
        }
    """
    with_age = build_query(schema, source, {"withAge": True})
    without_age = build_query(schema, source, {"withAge": False})

    assert [s.name for s in with_age.selections[0].selections] == ["firstName", "age"]
    assert [s.name for s in without_age.selections[0].selections] == ["firstName"]


def test_operation_selection():
    """Test operationName picks one of several operations."""
    source = """
        query A { user(id: "23") { firstName } }
        query B { company(id: "1") { name } }
    """
    query = build_query(schema, source, operation_name="B")

    assert query.operation_name == "B"
    assert query.selections[0].name == "company"

    with pytest.raises(MalformedQuery):
        build_query(schema, source)
    with pytest.raises(MalformedQuery):
        build_query(schema, source, operation_name="C")


def test_fragment_only_document():
    """Test documents without operations are rejected."""
    with pytest.raises(MalformedQuery):
        build_query(schema, "fragment F on User { id }")


def test_mutation_rejected():
    """Test only query operations are accepted."""
    with pytest.raises(MalformedQuery):
        build_query(schema, "mutation { __typename }")


def test_introspection_flag():
    """Test introspection-only operations are flagged."""
    query = build_query(schema, "{ __schema { queryType { name } } }")

    assert query.introspection is True
    assert query.document is not None


def test_introspection_mixed_with_data():
    """Test introspection cannot share an operation with data fields."""
    with pytest.raises(MalformedQuery):
        build_query(schema, '{ __schema { queryType { name } } user(id: "23") { id } }')


def test_formatted_errors():
    """Test the rejection body lists every error."""
    with pytest.raises(MalformedQuery) as exc_info:
        build_query(schema, '{ user(id: "23") { salary bonus } }')

    body = exc_info.value.formatted
    assert set(body) == {"errors"}
    assert len(body["errors"]) == 2
    assert all("message" in error for error in body["errors"])
