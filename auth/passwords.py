"""
auth/passwords.py -- One-way password hashing (bcrypt).

Bcrypt is the right choice for low-entropy secrets (passwords) because its
cost factor makes brute-force expensive. Every call to hash_password() draws a
fresh salt, so hashing the same plaintext twice yields two different digests.

bcrypt is used directly rather than through passlib. passlib's wrap-bug
detection feeds bcrypt a password longer than 72 bytes, which bcrypt 4.x+
rejects with an explicit error.

_DUMMY_HASH enables timing equalization in SessionService.authenticate() so
response time does not reveal whether an email is registered.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import bcrypt

from core.config import get_settings

_settings = get_settings()

# bcrypt only consumes the first 72 bytes of its input; newer releases raise
# instead of truncating, so both hash and verify cut at the same boundary.
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a salted bcrypt digest of the given plaintext password."""
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext matches the digest.

    Never raises: a mismatch and a malformed digest both return False.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("userhub_timing_dummy")
