"""
Auth and eager-loading checks used by GraphQL resolvers
"""

import strawberry
from sqlalchemy import inspect

from ..auth.context import ANONYMOUS, AuthContext, authenticate
from ..auth.tokens import AuthenticationError
from ..logging import get_logger

logger = get_logger(__name__)


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Authenticate the HTTP request behind a GraphQL operation.

    Queries are public apart from registeredEvents, so rejected credentials
    degrade to an anonymous context instead of failing the whole operation.
    """
    request = info.context.get("request")
    if request is None:
        return ANONYMOUS

    try:
        return await authenticate(request.headers.get("authorization"))
    except AuthenticationError as e:
        logger.info("Treating request as anonymous", reason=str(e))
        return ANONYMOUS


def ensure_preloaded(obj: object, attr_name: str) -> None:
    """
    Fail loudly when a relationship would trigger a lazy load.

    Lazy loads are not possible on an AsyncSession, so every relationship a
    resolver touches must come from selectinload().

    Raises:
        RuntimeError: If the relationship has not been loaded
    """
    if attr_name in inspect(obj).unloaded:
        raise RuntimeError(
            f"{type(obj).__name__}.{attr_name} was not preloaded; use selectinload() in the query"
        )
