"""Bearer token verification for the configured auth provider."""

from __future__ import annotations

from typing import Literal, NotRequired, TypedDict

import jwt

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

# Subject every request maps to when FEST_AUTH_PROVIDER=none
DEV_SUBJECT = "dev-user"


class AuthenticationError(Exception):
    """Raised when a request carries credentials that cannot be accepted."""

    pass


class Principal(TypedDict):
    """Who a token says the caller is, before mapping onto a local user."""

    provider: Literal["jwt", "none"]
    subject: str
    email: NotRequired[str]
    name: NotRequired[str]


def verify_token(token: str) -> Principal:
    """
    Turn a bearer token into a principal using ``settings.auth_provider``.

    Raises:
        AuthenticationError: If the token is rejected
        ValueError: If the configured provider is unknown
    """
    provider = settings.auth_provider
    if provider == "none":
        return _development_principal()
    if provider == "jwt":
        return _decode_jwt(token)
    raise ValueError(f"Unsupported auth provider: {provider}")


def _development_principal() -> Principal:
    if settings.environment.lower() in ("production", "prod"):
        logger.error("Refusing no-auth mode in production")
        raise AuthenticationError("No-auth mode is disabled in production")
    return Principal(provider="none", subject=DEV_SUBJECT, name="Development User")


def _decode_jwt(token: str) -> Principal:
    if not settings.jwt_secret:
        raise AuthenticationError("JWT secret is not configured (set FEST_JWT_SECRET)")

    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        logger.info("Rejected JWT", error=str(e))
        raise AuthenticationError("Invalid token") from e

    principal = Principal(provider="jwt", subject=str(claims["sub"]))
    if email := claims.get("email"):
        principal["email"] = email
    if name := claims.get("name"):
        principal["name"] = name
    return principal
