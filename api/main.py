"""
api/main.py -- FastAPI application entry point for TokenGate.

Exposes account registration, login, a token-protected profile route, and
logout over HTTP.

Run with:      python main.py
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for the configured browser origins
  2. log_requests   -- one access-log line per request

Lifespan builds the account store, directory and token issuer once and
parks them on app.state, where routes and dependencies look them up.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.v1.auth import router as auth_router
from auth.directory import AccountDirectory
from auth.errors import AuthError
from auth.store import InMemoryAccountStore
from auth.tokens import TokenIssuer
from core.config import get_settings

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("tokengate.api")

# Read once at import: a production deployment without JWT_SECRET fails here,
# before the server binds a port.
_settings = get_settings()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build auth components on startup; nothing to release on shutdown.

    The account store is process-local, so every restart begins with an
    empty directory. Tokens issued before a restart still verify (when
    JWT_SECRET is stable) but resolve to no account -- /profile answers 404.
    """
    logger.info("TokenGate API starting up (environment=%s)", _settings.environment)
    app.state.settings = _settings
    app.state.directory = AccountDirectory(InMemoryAccountStore(), bcrypt_rounds=_settings.bcrypt_rounds)
    app.state.tokens = TokenIssuer(_settings.jwt_secret, expire_seconds=_settings.token_expire_seconds)
    logger.info("Auth initialized (bcrypt_rounds=%d)", _settings.bcrypt_rounds)

    yield

    logger.info("TokenGate API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="TokenGate API",
    description="Account registration and signed bearer-token sessions.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so clients can parse
# errors uniformly: {success: false, message, code[, error]}.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, error: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, code=code, error=error).model_dump(exclude_none=True),
    )


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Translate directory/token errors into their declared status and code."""
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body is not JSON or a field has the wrong type."""
    return _error(400, "validation_error", "Request validation failed.")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The traceback goes to the log only. The client gets a generic message and
    the exception class name.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.", error=type(exc).__name__)


# ---------------------------------------------------------------------------
# Liveness endpoints
#
# Defined directly in main.py (not in a router) so they are always reachable
# regardless of router registration state.
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", tags=["Health"])
async def health(request: Request) -> HealthResponse:
    """Return API liveness, version, and the number of registered accounts."""
    directory: AccountDirectory = request.app.state.directory
    return HealthResponse(
        version=__version__,
        components={"app": "ok", "accounts": directory.count()},
    )


@app.get("/api/v1/check-server", response_class=PlainTextResponse, tags=["Health"])
async def check_server() -> str:
    return "Server is running"
