"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection hashes a password longer than 72 bytes, which bcrypt 4.x rejects.

bcrypt only looks at the first 72 bytes of input and current releases raise
ValueError for anything longer, so MAX_PASSWORD_BYTES is enforced by the
directory before hashing.
"""

from __future__ import annotations

import bcrypt

MAX_PASSWORD_BYTES = 72


def hash_password(plain: str, rounds: int = 10) -> str:
    """Return a salted bcrypt hash of the plaintext password.

    rounds is the bcrypt work factor (log2 of the iteration count).
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. Oversized or non-bcrypt input
    raises ValueError inside bcrypt; that is a mismatch, not a server error.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
