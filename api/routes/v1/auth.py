"""
api/routes/v1/auth.py -- Registration, login, profile, and logout endpoints.

Routes:
  POST /api/v1/register  -- create account; returns user + token (201)
  POST /api/v1/login     -- password login; returns user + token, sets cookie
  GET  /api/v1/profile   -- current account (requires token)
  POST /api/v1/logout    -- clears cookie; always 200

Handlers are thin: AccountDirectory and TokenIssuer (on app.state) do the
work and raise AuthError subclasses, which api/main.py maps to responses.

register and login are sync `def` routes on purpose -- bcrypt blocks, and
FastAPI runs sync routes in its thread pool instead of on the event loop.

Security:
  Login failures are one error kind for unknown email and wrong password.
  The directory runs bcrypt on both branches; do not add an early return here.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    AccountResponse,
    AuthResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
)
from auth.dependencies import get_current_account
from auth.directory import AccountDirectory
from auth.errors import InvalidCredentialsError, ValidationError
from auth.models import AccountView
from auth.tokens import TokenIssuer, clear_auth_cookie, set_auth_cookie

logger = logging.getLogger("tokengate.api")

# Auth policy:
# - POST /api/v1/register: public
# - POST /api/v1/login:    public
# - GET  /api/v1/profile:  requires token (get_current_account)
# - POST /api/v1/logout:   public -- clearing a cookie needs no prior auth
router = APIRouter()


def _token_response(status_code: int, message: str, view: AccountView, token: str) -> JSONResponse:
    resp = JSONResponse(
        status_code=status_code,
        content=AuthResponse(
            message=message,
            user=AccountResponse.from_view(view),
            token=token,
        ).model_dump(by_alias=True),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and issue its first token.

    No cookie is set here; only login delivers the cookie copy.
    """
    directory: AccountDirectory = request.app.state.directory
    tokens: TokenIssuer = request.app.state.tokens

    view = directory.register(body.username, body.email, body.password)
    token = tokens.issue(view.id, view.email)
    return _token_response(201, "User registered successfully", view, token)


@router.post("/login", response_model=AuthResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return the token and set it as a cookie."""
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    directory: AccountDirectory = request.app.state.directory
    tokens: TokenIssuer = request.app.state.tokens

    try:
        view = directory.authenticate(body.email, body.password)
    except InvalidCredentialsError:
        logger.info("Failed login attempt")
        raise

    token = tokens.issue(view.id, view.email)
    resp = _token_response(200, "Login successful", view, token)
    set_auth_cookie(
        resp,
        token,
        expire_seconds=tokens.expire_seconds,
        secure=request.app.state.settings.secure_cookies,
    )
    return resp


@router.get("/profile", response_model=ProfileResponse)
def profile(current_account: AccountView = Depends(get_current_account)) -> JSONResponse:
    """Return the account the presented token belongs to."""
    return JSONResponse(
        content=ProfileResponse(
            message="Profile retrieved successfully",
            user=AccountResponse.from_view(current_account),
        ).model_dump(by_alias=True),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout() -> JSONResponse:
    """Clear the token cookie.

    Tokens are not revoked server-side: a copy held elsewhere stays valid
    until it expires.
    """
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully").model_dump())
    clear_auth_cookie(resp)
    return resp
