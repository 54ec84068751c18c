"""
auth/errors.py -- Error kinds raised by the account directory and token issuer.

Every error carries the HTTP status and machine-readable code it maps to, so
api/main.py can translate any AuthError with a single exception handler.
The auth package itself never builds HTTP responses.

InvalidCredentialsError deliberately covers both "no such email" and "wrong
password". Callers must not be able to tell the two apart.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for every expected auth failure."""

    status_code: int = 400
    code: str = "auth_error"
    default_message: str = "Authentication error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input."""

    code = "validation_error"
    default_message = "Invalid request."


class ConflictError(AuthError):
    """An account with this email already exists."""

    code = "conflict"
    default_message = "User already exists"


class InvalidCredentialsError(AuthError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class UnauthorizedError(AuthError):
    """No usable session token was presented."""

    status_code = 401
    code = "unauthorized"
    default_message = "Access token required"


class MalformedTokenError(UnauthorizedError):
    """Token could not be decoded, or its signature/algorithm/claims are wrong."""

    code = "invalid_token"
    default_message = "Invalid or expired token"


class ExpiredTokenError(UnauthorizedError):
    code = "token_expired"
    default_message = "Invalid or expired token"


class NotFoundError(AuthError):
    """A verified token names an account that no longer exists."""

    status_code = 404
    code = "not_found"
    default_message = "User not found"
