"""
tests/conftest.py -- Shared test fixtures for TokenGate tests.

This module provides:
  - TEST_SECRET: the JWT_SECRET every test process runs with
  - _patch_lifespan(): wires a test directory into app.state, bypassing real startup
  - api_client: (TestClient, AccountDirectory, InMemoryAccountStore) per test
  - directory: an AccountDirectory over a fresh in-memory store for unit tests

The environment must be set before any api/ or core/ import: api.main reads
get_settings() at import time, and production mode without JWT_SECRET
refuses to start. BCRYPT_ROUNDS=4 is bcrypt's minimum and keeps hashing fast.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"

# CRITICAL: set before any api/core import.
os.environ["ENVIRONMENT"] = "development"
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.directory import AccountDirectory
from auth.store import InMemoryAccountStore
from auth.tokens import TokenIssuer
from core.config import get_settings


def _patch_lifespan(directory: AccountDirectory, tokens: TokenIssuer):
    """Return an async context manager that replaces the real lifespan.

    Lets tests hold references to the same directory and store the routes use,
    e.g. to wipe the store and simulate a restart.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = get_settings()
        app.state.directory = directory
        app.state.tokens = tokens
        yield

    return test_lifespan


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def directory(store: InMemoryAccountStore) -> AccountDirectory:
    return AccountDirectory(store, bcrypt_rounds=4)


@pytest.fixture
def api_client(
    directory: AccountDirectory, store: InMemoryAccountStore
) -> Generator[tuple[TestClient, AccountDirectory, InMemoryAccountStore], None, None]:
    """Yield (client, directory, store) backed by a fresh, empty store.

    Function-scoped: each test gets an empty directory and an empty cookie jar,
    so a cookie set by one test's login never authenticates another test.
    """
    tokens = TokenIssuer(TEST_SECRET, expire_seconds=24 * 60 * 60)
    app.router.lifespan_context = _patch_lifespan(directory, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, directory, store
