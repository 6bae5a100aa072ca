"""
GraphQL schema and its FastAPI router
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .loaders import Loaders
from .queries.root import Query

logger = get_logger(__name__)

schema = strawberry.Schema(query=Query)


def validate_schema() -> None:
    """
    Check the schema and run an introspection query against it.

    Raises:
        RuntimeError: If either step reports errors
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if not problems:
        result = graphql_sync(graphql_schema, get_introspection_query())
        problems = [str(e) for e in result.errors or []]

    if problems:
        logger.error("Invalid GraphQL schema", errors=problems)
        raise RuntimeError(f"Invalid GraphQL schema: {'; '.join(problems)}")


async def get_context(request: Request) -> dict[str, Any]:
    # DataLoader caches must not outlive the request
    return {"request": request, "loaders": Loaders()}


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.debug,
        context_getter=get_context,
    )
