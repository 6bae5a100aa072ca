"""Authentication for the Fest backend."""

from .context import ANONYMOUS, AuthContext, authenticate
from .tokens import AuthenticationError, Principal, verify_token

__all__ = [
    "ANONYMOUS",
    "AuthContext",
    "AuthenticationError",
    "Principal",
    "authenticate",
    "verify_token",
]
