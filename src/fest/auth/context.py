"""Resolving the Authorization header of a request to a local user."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import settings
from ..database.connection import get_async_session
from ..logging import bind_user_id, get_logger
from .tokens import AuthenticationError, verify_token
from .users import get_or_create_user

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """The local user behind a request, if any."""

    user_id: int | None = None
    subject: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = AuthContext()


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Expected 'Authorization: Bearer <token>'")
    return token


async def authenticate(authorization: str | None) -> AuthContext:
    """
    Resolve an Authorization header value to an AuthContext.

    Without a header the caller is anonymous, except in no-auth mode where
    every request belongs to the development user.

    Raises:
        AuthenticationError: If the header is malformed or the token rejected
    """
    if authorization:
        token = _bearer_token(authorization)
    elif settings.auth_provider == "none":
        token = ""
    else:
        return ANONYMOUS

    principal = verify_token(token)

    async with get_async_session() as db:
        user_id = await get_or_create_user(db, principal)

    bind_user_id(user_id)
    logger.debug("Authenticated request", user_id=user_id, provider=principal["provider"])
    return AuthContext(user_id=user_id, subject=principal["subject"])
