"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, near-zero logic). Stores and the
directory do the work; routes map these onto the transport models in
api/models.py.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Account:
    """A registered principal as held by the account store.

    email is the login key and is unique across the store (case-sensitive).
    username is a display name only -- duplicates are allowed.

    hashed_password is the bcrypt hash. It never leaves the auth package:
    everything handed to callers is an AccountView.
    """

    id: str
    username: str
    email: str
    hashed_password: str
    created_at: str

    def to_view(self) -> AccountView:
        return AccountView(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class AccountView:
    """An Account without its credential hash."""

    id: str
    username: str
    email: str
    created_at: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified content of a session token. Timestamps are epoch seconds."""

    subject_id: str
    email: str
    issued_at: int
    expires_at: int
