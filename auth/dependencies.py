"""
auth/dependencies.py -- FastAPI Depends() helpers for session authentication.

Token sources are independent strategy functions, tried in TOKEN_SOURCES order:
  1. "token" cookie -- set by POST /login.
  2. Authorization: Bearer <token> header -- API clients.

The first source that yields a token wins; verification never knows which
source produced it. Dropping a delivery mechanism means removing one entry
from TOKEN_SOURCES.

get_current_account() raises AuthError subclasses, which api/main.py turns
into the standard error envelope:
  no token           -> UnauthorizedError (401)
  bad/expired token  -> MalformedTokenError / ExpiredTokenError (401)
  unknown subject    -> NotFoundError (404)

Layer rule: no imports from api/. This module may import from fastapi because
it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request

from auth.directory import AccountDirectory
from auth.errors import NotFoundError, UnauthorizedError
from auth.models import AccountView
from auth.tokens import COOKIE_NAME, TokenIssuer

_BEARER_PREFIX = "Bearer "


def token_from_cookie(request: Request) -> str | None:
    return request.cookies.get(COOKIE_NAME) or None


def token_from_bearer_header(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith(_BEARER_PREFIX):
        return auth_header[len(_BEARER_PREFIX) :].strip() or None
    return None


TOKEN_SOURCES: tuple[Callable[[Request], str | None], ...] = (
    token_from_cookie,
    token_from_bearer_header,
)


def extract_token(request: Request) -> str | None:
    """Return the first token found by TOKEN_SOURCES, or None."""
    for source in TOKEN_SOURCES:
        token = source(request)
        if token:
            return token
    return None


def get_current_account(request: Request) -> AccountView:
    """Require a valid session token and resolve it to an account.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(account: AccountView = Depends(get_current_account)): ...
    """
    token = extract_token(request)
    if token is None:
        raise UnauthorizedError()

    tokens: TokenIssuer = request.app.state.tokens
    claims = tokens.verify(token)

    directory: AccountDirectory = request.app.state.directory
    account = directory.find_by_id(claims.subject_id)
    if account is None:
        raise NotFoundError()
    return account
