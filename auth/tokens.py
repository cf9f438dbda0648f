"""
auth/tokens.py -- Session token issue/verify and bearer header parsing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry the
       user id as the subject claim plus iat/exp. Lifetime defaults to
       Settings.token_expire_seconds (24 hours).

  Verification returns None on any failure -- malformed token, bad signature,
       expired, or missing subject. The caller sees one "unauthorized" outcome
       and cannot learn which check failed.

  No server-side state: tokens are never persisted and there is no revocation
       list. A token is valid until its exp claim passes.

  SECRET_KEY: sourced from core.config.get_settings() once at module load.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from core.config import get_settings

logger = logging.getLogger("userhub.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"
_BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(subject: str, expire_seconds: int = 0, issued_at: datetime | None = None) -> str:
    """Encode a signed JWT naming the given subject.

    Args:
        subject:        User id stored as the JWT subject claim.
        expire_seconds: Token lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds.
        issued_at:      Issue timestamp; defaults to now. Expiry is computed
                        from this value.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> str | None:
    """Verify a JWT and return its subject, or None on any failure."""
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected session token (%s)", type(exc).__name__)
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject


# ---------------------------------------------------------------------------
# Header parsing
# ---------------------------------------------------------------------------


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an 'Authorization: Bearer <token>' value, or None."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None
