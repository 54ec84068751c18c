"""
auth/directory.py -- Account creation, lookup, and credential checks.

AccountDirectory is the only writer of the account collection. It owns:
  - input validation for registration (all three fields required)
  - the email uniqueness invariant (pre-check + atomic insert in the store)
  - password hashing at the configured bcrypt work factor
  - constant-time, enumeration-safe authentication

Timing equalization:
  authenticate() always runs bcrypt, whether or not the email exists. An
  unknown email is checked against _dummy_hash, computed once at construction
  with the same work factor as real hashes, so both failure branches cost the
  same and raise the same InvalidCredentialsError.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from auth.errors import ConflictError, InvalidCredentialsError, ValidationError
from auth.models import Account, AccountView
from auth.passwords import MAX_PASSWORD_BYTES, hash_password, verify_password
from auth.store import AccountStore

logger = logging.getLogger("tokengate.auth")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AccountDirectory:
    """Register and authenticate accounts held in an AccountStore.

    Usage:
        directory = AccountDirectory(InMemoryAccountStore(), bcrypt_rounds=10)
        view = directory.register("alice", "a@x.com", "pw123456")
        directory.authenticate("a@x.com", "pw123456")
    """

    def __init__(self, store: AccountStore, bcrypt_rounds: int = 10) -> None:
        self._store = store
        self._rounds = bcrypt_rounds
        self._dummy_hash = hash_password("tokengate_timing_dummy", rounds=bcrypt_rounds)

    def register(self, username: str | None, email: str | None, password: str | None) -> AccountView:
        """Create an account and return its view.

        Raises:
            ValidationError: a field is missing/empty, or the password is
                longer than bcrypt can hash.
            ConflictError: the email is already registered. Also raised by the
                store if a concurrent registration claimed the email while
                this one was hashing.
        """
        if not username or not email or not password:
            raise ValidationError("Username, email, and password are required")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        # Cheap fast-fail before paying for bcrypt. The store re-checks atomically.
        if self._store.find_by_email(email) is not None:
            raise ConflictError()

        account = Account(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            hashed_password=hash_password(password, rounds=self._rounds),
            created_at=_now_iso(),
        )
        self._store.insert(account)
        logger.info("Registered account %s", account.id)
        return account.to_view()

    def authenticate(self, email: str, password: str) -> AccountView:
        """Return the account view if email and password match.

        Raises InvalidCredentialsError for an unknown email and for a wrong
        password alike. Do not split these branches.
        """
        account = self._store.find_by_email(email)
        if account is None:
            # Equalize timing -- do NOT return before running bcrypt.
            verify_password(password, self._dummy_hash)
            raise InvalidCredentialsError()
        if not verify_password(password, account.hashed_password):
            raise InvalidCredentialsError()
        return account.to_view()

    def find_by_id(self, account_id: str) -> AccountView | None:
        account = self._store.find_by_id(account_id)
        return account.to_view() if account is not None else None

    def count(self) -> int:
        return self._store.count()
