"""Unit tests for auth/sessions.py -- SessionService.authenticate().

Covers:
- correct credentials yield a token whose subject is the user id
- wrong password and unknown email raise Unauthorized with identical messages
- a changed password replaces the old one for login
"""

from __future__ import annotations

import pytest

from auth.dependencies import UserContext
from auth.errors import Unauthorized
from auth.sessions import SessionService
from auth.tokens import decode_access_token
from auth.users import UserLifecycleService


def test_authenticate_success(users: UserLifecycleService, sessions: SessionService) -> None:
    created = users.create("Ann", "ann@x.com", "p1")
    token = sessions.authenticate("ann@x.com", "p1")
    assert decode_access_token(token) == created.id


def test_wrong_password_and_unknown_email_are_indistinguishable(
    users: UserLifecycleService, sessions: SessionService
) -> None:
    users.create("Ann", "ann@x.com", "p1")

    with pytest.raises(Unauthorized) as wrong_pw:
        sessions.authenticate("ann@x.com", "nope")
    with pytest.raises(Unauthorized) as unknown:
        sessions.authenticate("nobody@x.com", "p1")

    assert wrong_pw.value.message == "Wrong email or password"
    assert unknown.value.message == wrong_pw.value.message
    assert unknown.value.status_code == wrong_pw.value.status_code == 401


def test_login_uses_latest_password(users: UserLifecycleService, sessions: SessionService) -> None:
    """After a password change the old password stops working."""
    created = users.create("Ann", "ann@x.com", "p1")
    caller = UserContext(user=users.store.get_by_id(created.id))
    users.update(created.id, caller, {"password": "p2"})

    with pytest.raises(Unauthorized):
        sessions.authenticate("ann@x.com", "p1")
    assert decode_access_token(sessions.authenticate("ann@x.com", "p2")) == created.id
