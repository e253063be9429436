"""GraphQL schema definition and HTTP router."""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from graphql import GraphQLError, print_schema
from pydantic import BaseModel, Field, ValidationError

from user_graph.api.graphql.graphiql import GRAPHIQL_HTML
from user_graph.api.graphql.types import build_registry
from user_graph.config import get_settings
from user_graph.errors import MalformedQuery
from user_graph.graph import GraphExecutor, build_query, to_graphql_schema

logger = logging.getLogger("graphql_api")

# Create schema
registry = build_registry()
schema = to_graphql_schema(registry)
executor = GraphExecutor(registry, schema)

# Create router for FastAPI
graphql_router = APIRouter(tags=["GraphQL"])


class GraphQLRequest(BaseModel):
    """GraphQL-over-HTTP request body."""

    query: str
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")


async def run_query(
    source: str,
    variables: Optional[dict[str, Any]] = None,
    operation_name: Optional[str] = None,
) -> JSONResponse:
    """Execute a query document and render the GraphQL response."""
    try:
        query = build_query(schema, source, variables, operation_name)
        result = await executor.execute(query)
    except MalformedQuery as e:
        logger.info(f"Rejected query: {e}")
        return JSONResponse(e.formatted, status_code=400)
    return JSONResponse(result.formatted)


@graphql_router.post("")
async def graphql_post(request: Request) -> JSONResponse:
    """Execute a query sent as JSON."""
    try:
        body = GraphQLRequest.model_validate_json(await request.body())
    except ValidationError as e:
        rejected = MalformedQuery(
            [
                GraphQLError(f"Invalid request body at '{_location(error['loc'])}': {error['msg']}")
                for error in e.errors()
            ]
        )
        logger.info(f"Rejected request body: {rejected}")
        return JSONResponse(rejected.formatted, status_code=400)
    return await run_query(body.query, body.variables, body.operation_name)


def _location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "body"


@graphql_router.get("", response_model=None)
async def graphql_get(
    query: Optional[str] = Query(None),
    variables: Optional[str] = Query(None),
    operation_name: Optional[str] = Query(None, alias="operationName"),
) -> HTMLResponse | JSONResponse:
    """Execute a query from the URL, or serve GraphiQL when there is none."""
    if query is None:
        if get_settings().graphiql:
            return HTMLResponse(GRAPHIQL_HTML)
        return JSONResponse(MalformedQuery("Must provide query string.").formatted, status_code=400)

    try:
        parsed = json.loads(variables) if variables else None
    except ValueError:
        return JSONResponse(MalformedQuery("Variables are invalid JSON.").formatted, status_code=400)
    return await run_query(query, parsed, operation_name)


@graphql_router.get("/schema", response_class=PlainTextResponse)
async def graphql_sdl() -> str:
    """Schema in GraphQL SDL."""
    return print_schema(schema)
