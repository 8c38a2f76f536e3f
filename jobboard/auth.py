from __future__ import annotations

from fastapi import Request

from .config import Settings
from .errors import AuthenticationError
from .token import Principal, decode_access_token

MISSING_TOKEN_MESSAGE = "Access denied. No token provided."


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_from_header(request: Request) -> str | None:
    """Extract the bearer token from the Authorization header, if any."""
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_principal(settings: Settings, token: str | None) -> Principal | None:
    """
    Turn an optional bearer token into a principal.

    Returns None when no token was presented and raises
    ``AuthenticationError`` when one was presented but does not verify.
    The store is never consulted.
    """
    if token is None:
        return None
    return decode_access_token(settings, token)


def get_current_principal(request: Request) -> Principal:
    """FastAPI dependency for routes that need an authenticated caller."""
    token = get_token_from_header(request)
    if token is None:
        raise AuthenticationError(MISSING_TOKEN_MESSAGE)
    return resolve_principal(get_settings(request), token)
