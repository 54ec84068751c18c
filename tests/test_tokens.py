"""
tests/test_tokens.py -- Unit tests for TokenIssuer.

Expiry is driven through the injected clock; nothing here sleeps.
Tampering cases build tokens by hand so the verifier sees exactly the bytes
an attacker would send.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.errors import ExpiredTokenError, MalformedTokenError, UnauthorizedError
from auth.tokens import TokenIssuer

SECRET = "unit-test-secret-0123456789abcdef0123456789"
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
DAY = timedelta(hours=24)


class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _b64url(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


@pytest.fixture
def clock() -> _Clock:
    return _Clock(T0)


@pytest.fixture
def issuer(clock: _Clock) -> TokenIssuer:
    return TokenIssuer(SECRET, clock=clock)


def test_issue_then_verify_round_trip(issuer: TokenIssuer) -> None:
    claims = issuer.verify(issuer.issue("acct-1", "a@x.com"))
    assert claims.subject_id == "acct-1"
    assert claims.email == "a@x.com"
    assert claims.issued_at == int(T0.timestamp())
    assert claims.expires_at == int((T0 + DAY).timestamp())


def test_token_valid_just_before_expiry(issuer: TokenIssuer, clock: _Clock) -> None:
    token = issuer.issue("acct-1", "a@x.com")
    clock.now = T0 + DAY - timedelta(seconds=1)
    assert issuer.verify(token).subject_id == "acct-1"


def test_token_expired_at_lifetime_boundary(issuer: TokenIssuer, clock: _Clock) -> None:
    token = issuer.issue("acct-1", "a@x.com")
    clock.now = T0 + DAY
    with pytest.raises(ExpiredTokenError):
        issuer.verify(token)


def test_token_expired_long_after(issuer: TokenIssuer, clock: _Clock) -> None:
    token = issuer.issue("acct-1", "a@x.com")
    clock.now = T0 + 30 * DAY
    with pytest.raises(ExpiredTokenError):
        issuer.verify(token)


def test_custom_lifetime(clock: _Clock) -> None:
    issuer = TokenIssuer(SECRET, expire_seconds=60, clock=clock)
    token = issuer.issue("acct-1", "a@x.com")
    clock.now = T0 + timedelta(seconds=60)
    with pytest.raises(ExpiredTokenError):
        issuer.verify(token)


def test_token_from_other_secret_rejected(issuer: TokenIssuer, clock: _Clock) -> None:
    other = TokenIssuer("another-secret-0123456789abcdef0123456789", clock=clock)
    with pytest.raises(MalformedTokenError):
        issuer.verify(other.issue("acct-1", "a@x.com"))


def test_altered_payload_rejected(issuer: TokenIssuer) -> None:
    header, _payload, signature = issuer.issue("acct-1", "a@x.com").split(".")
    forged = _b64url(
        {
            "sub": "acct-admin",
            "email": "a@x.com",
            "iat": int(T0.timestamp()),
            "exp": int((T0 + DAY).timestamp()),
        }
    )
    with pytest.raises(MalformedTokenError):
        issuer.verify(f"{header}.{forged}.{signature}")


def test_alg_none_rejected(issuer: TokenIssuer) -> None:
    header = _b64url({"alg": "none", "typ": "JWT"})
    payload = _b64url(
        {
            "sub": "acct-1",
            "email": "a@x.com",
            "iat": int(T0.timestamp()),
            "exp": int((T0 + DAY).timestamp()),
        }
    )
    with pytest.raises(MalformedTokenError):
        issuer.verify(f"{header}.{payload}.")


def test_other_hmac_algorithm_rejected(issuer: TokenIssuer) -> None:
    token = jwt.encode(
        {"sub": "acct-1", "email": "a@x.com", "iat": int(T0.timestamp()), "exp": int((T0 + DAY).timestamp())},
        SECRET,
        algorithm="HS512",
    )
    with pytest.raises(MalformedTokenError):
        issuer.verify(token)


def test_missing_claim_rejected(issuer: TokenIssuer) -> None:
    token = jwt.encode(
        {"sub": "acct-1", "iat": int(T0.timestamp()), "exp": int((T0 + DAY).timestamp())},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedTokenError):
        issuer.verify(token)


@pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", "a.b"])
def test_garbage_rejected(issuer: TokenIssuer, garbage: str) -> None:
    with pytest.raises(MalformedTokenError):
        issuer.verify(garbage)


def test_token_errors_are_unauthorized() -> None:
    assert issubclass(MalformedTokenError, UnauthorizedError)
    assert issubclass(ExpiredTokenError, UnauthorizedError)
    assert MalformedTokenError().status_code == ExpiredTokenError().status_code == 401


def test_empty_secret_rejected() -> None:
    with pytest.raises(ValueError):
        TokenIssuer("")
