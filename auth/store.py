"""
auth/store.py -- Storage seam for Account records.

Pattern: Repository. AccountDirectory talks to an AccountStore and never to a
concrete collection, so a durable backend can replace the in-memory one
without touching directory or route code.

InMemoryAccountStore is a process-local placeholder: records are lost on
restart, which is why find_by_id() callers must tolerate absence.

Concurrency:
  FastAPI runs sync handlers in a thread pool, so two registrations can race.
  insert() performs the email uniqueness check and the append under one lock
  and raises ConflictError when it loses. Reads take the same lock so they
  never observe a half-built index.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import threading
from typing import Protocol

from auth.errors import ConflictError
from auth.models import Account


class AccountStore(Protocol):
    """What AccountDirectory needs from a backing store."""

    def find_by_email(self, email: str) -> Account | None: ...

    def find_by_id(self, account_id: str) -> Account | None: ...

    def insert(self, account: Account) -> None:
        """Persist a new account. Raises ConflictError if the email is taken."""
        ...

    def count(self) -> int: ...


class InMemoryAccountStore:
    """Thread-safe, append-only dict-backed AccountStore.

    Usage:
        store = InMemoryAccountStore()
        store.insert(account)
        store.find_by_email("a@x.com")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, Account] = {}
        # email -> id. Exact-match keys: emails are case-sensitive.
        self._ids_by_email: dict[str, str] = {}

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account_id = self._ids_by_email.get(email)
            return self._by_id.get(account_id) if account_id is not None else None

    def find_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            return self._by_id.get(account_id)

    def insert(self, account: Account) -> None:
        with self._lock:
            if account.email in self._ids_by_email:
                raise ConflictError()
            if account.id in self._by_id:
                raise ValueError(f"duplicate account id {account.id!r}")
            self._by_id[account.id] = account
            self._ids_by_email[account.email] = account.id

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)

    def clear(self) -> None:
        """Drop every record. Simulates a restart of the process-local store."""
        with self._lock:
            self._by_id.clear()
            self._ids_by_email.clear()
