"""
auth/tokens.py -- Session token issue/verify and the token cookie.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with JWT_SECRET and carry
       sub (account id), email, iat and exp. Nothing is stored server-side:
       the signature is the only thing that makes a token trustworthy.

  Algorithm pinning: decode() is called with algorithms=[HS256], so tokens
       whose header names any other algorithm -- including "none" -- fail
       signature verification instead of being accepted unsigned.

  Expiry: checked here against the injectable clock rather than inside
       jose, so expiry is testable without sleeping. A token is expired from
       the instant the clock reaches exp.

  Revocation: there is none. A token stays valid for its whole lifetime
       even after logout; logout only clears the client's cookie copy.

Layer rule: no imports from api/. The cookie helpers take any object with
Starlette's set_cookie/delete_cookie methods.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.errors import ExpiredTokenError, MalformedTokenError
from auth.models import TokenClaims

ALGORITHM = "HS256"
COOKIE_NAME = "token"
DEFAULT_EXPIRE_SECONDS = 24 * 60 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Mint and verify HS256 session tokens.

    Holds only the signing secret and the expiry policy -- no per-session state,
    so issue() and verify() are safe to call from any thread.

    Args:
        secret_key:     HS256 signing key (validated for length by Settings).
        expire_seconds: Token lifetime. exp = iat + expire_seconds.
        clock:          Returns the current aware datetime. Injected by tests.
    """

    def __init__(
        self,
        secret_key: str,
        expire_seconds: int = DEFAULT_EXPIRE_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret_key")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds
        self._clock = clock

    def issue(self, subject_id: str, email: str) -> str:
        """Return a signed token for the given account."""
        issued_at = self._clock()
        expires_at = issued_at + timedelta(seconds=self.expire_seconds)
        payload = {
            "sub": subject_id,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a token.

        Raises:
            MalformedTokenError: undecodable, bad signature, wrong algorithm,
                or a required claim missing/mistyped.
            ExpiredTokenError: the clock is at or past the exp claim.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise MalformedTokenError() from exc

        subject_id = payload.get("sub")
        email = payload.get("email")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject_id, str) or not isinstance(email, str):
            raise MalformedTokenError()
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise MalformedTokenError()

        if self._clock().timestamp() >= expires_at:
            raise ExpiredTokenError()

        return TokenClaims(
            subject_id=subject_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_auth_cookie(response, token: str, expire_seconds: int, secure: bool) -> None:
    """Write the token as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie (XSS mitigation).
    samesite="lax": not sent on cross-site POSTs.
    secure: HTTPS-only; enabled in production.
    max_age: matches the token lifetime so both expire together.
    """
    response.set_cookie(
        COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=secure,
        max_age=expire_seconds,
    )


def clear_auth_cookie(response) -> None:
    response.delete_cookie(COOKIE_NAME)
