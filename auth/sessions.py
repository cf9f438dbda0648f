"""
auth/sessions.py -- Email + password login.

SessionService.authenticate() always runs bcrypt, whether or not the email is
registered:
  - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as a real check)
  - Wrong password: bcrypt runs against the stored digest
Both failures raise the same Unauthorized message, so neither the response
body nor its timing reveals which accounts exist.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from auth.errors import Unauthorized
from auth.passwords import _DUMMY_HASH, verify_password
from auth.store import UserStore
from auth.tokens import create_access_token

logger = logging.getLogger("userhub.auth")

_BAD_CREDENTIALS = "Wrong email or password"


class SessionService:
    """Trades valid credentials for a signed session token."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def authenticate(self, email: str, password: str) -> str:
        """Return a session token bound to the user's id.

        Raises:
            Unauthorized: unknown email or wrong password (same message).
        """
        user = self.store.get_by_email(email)
        if user is None:
            # Equalize timing -- do NOT return before running bcrypt
            verify_password(password, _DUMMY_HASH)
            logger.info("Failed login attempt")
            raise Unauthorized(_BAD_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise Unauthorized(_BAD_CREDENTIALS)
        logger.info("Session issued for user %s", user.id)
        return create_access_token(user.id)
