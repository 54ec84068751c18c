"""
API request and response models for TokenGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request fields are Optional on purpose: a missing field must surface as the
directory's ValidationError (400, with a readable message), not as a schema
error listing pydantic internals.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from auth.models import AccountView

# Whitespace-only usernames/emails strip to "" and are then rejected as missing.
# Passwords are never stripped.
_Trimmed = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]
_Password = Annotated[str, StringConstraints(max_length=255)]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/register."""

    username: Optional[_Trimmed] = None
    email: Optional[_Trimmed] = None
    password: Optional[_Password] = None


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/login."""

    email: Optional[_Trimmed] = None
    password: Optional[_Password] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    """Public view of an account. Never carries the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    username: str
    email: str
    created_at: str = Field(serialization_alias="createdAt")

    @classmethod
    def from_view(cls, view: AccountView) -> "AccountResponse":
        return cls(
            id=view.id,
            username=view.username,
            email=view.email,
            created_at=view.created_at,
        )


class AuthResponse(BaseModel):
    """Response for POST /register and POST /login."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    user: AccountResponse
    token: str


class ProfileResponse(BaseModel):
    """Response for GET /profile."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    user: AccountResponse


class MessageResponse(BaseModel):
    """Bare success envelope (POST /logout)."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response.

    error is only populated for unexpected 500s and holds the exception class
    name, never a message or traceback.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str
    code: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str | int]
