"""
auth/users.py -- User record lifecycle: create, list, retrieve, update, delete.

Every operation that returns a user returns a PublicUser, so password_hash
never leaves this module.

Mutations are all-or-nothing per call. Validation (ownership, admin flag,
e-mail uniqueness) finishes before anything is written, and each write is a
single statement. A per-service lock serializes the check-then-write
sequences; the UNIQUE(email) constraint in the store catches anything that
slips past it from another process.

Ownership rules:
  update -- self only. A target id other than the caller's own is reported as
            NotFound for every caller, admins included.
  delete -- self, or any user when the caller is an admin.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import IntegrityError

from auth.dependencies import UserContext
from auth.errors import Conflict, Forbidden, NotFound, Unauthorized
from auth.models import PublicUser, User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import decode_access_token

logger = logging.getLogger("userhub.auth")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserLifecycleService:
    """Business rules for user records on top of a UserStore."""

    def __init__(self, store: UserStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self._clock = clock
        self._write_lock = threading.Lock()

    def _now_iso(self) -> str:
        return self._clock().isoformat(timespec="microseconds")

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def create(self, name: str, email: str, password: str, is_admin: bool = False) -> PublicUser:
        """Register a new user.

        Raises:
            Conflict: the e-mail is already registered.
        """
        password_hash = hash_password(password)
        with self._write_lock:
            if self.store.get_by_email(email) is not None:
                raise Conflict()
            now = self._now_iso()
            user = User(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=password_hash,
                is_admin=is_admin,
                created_at=now,
                updated_at=now,
            )
            try:
                self.store.create_user(user)
            except IntegrityError as exc:
                raise Conflict() from exc
        logger.info("Created user %s (admin=%s)", user.id, user.is_admin)
        return PublicUser.from_user(user)

    def list_users(self) -> list[PublicUser]:
        """Return every user in insertion order. Admin gating happens upstream."""
        return [PublicUser.from_user(u) for u in self.store.list_users()]

    def retrieve_self(self, token: str) -> PublicUser:
        """Return the record named by the token's subject.

        Verifies the token on its own rather than trusting an upstream gate.

        Raises:
            Unauthorized: the token does not verify.
            NotFound: the subject has no stored record.
        """
        subject = decode_access_token(token)
        if subject is None:
            raise Unauthorized()
        user = self.store.get_by_id(subject)
        if user is None:
            raise NotFound()
        return PublicUser.from_user(user)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, target_id: str, caller: UserContext, patch: Mapping[str, Any]) -> PublicUser:
        """Apply a partial update to the caller's own record.

        Recognised patch keys: name, email, password, is_admin. Other keys are
        ignored. updated_at is refreshed even when the patch is empty. An is_admin
        of None is a no-op for admins but still Forbidden for everyone else.

        Raises:
            NotFound: target_id is not the caller's id, or the record is gone.
            Forbidden: is_admin is present and the caller is not an admin.
            Conflict: the new e-mail belongs to another user.
        """
        if target_id != caller.user.id:
            if caller.is_admin:
                logger.warning(
                    "Admin %s attempted to update user %s; cross-user updates are not supported",
                    caller.user.id,
                    target_id,
                )
            raise NotFound()

        new_hash = hash_password(patch["password"]) if "password" in patch else None

        with self._write_lock:
            current = self.store.get_by_id(target_id)
            if current is None:
                raise NotFound()

            updates: dict[str, Any] = {}
            for field, value in patch.items():
                if field == "name":
                    updates["name"] = value
                elif field == "email":
                    owner = self.store.get_by_email(value)
                    if owner is not None and owner.id != current.id:
                        raise Conflict()
                    updates["email"] = value
                elif field == "password":
                    updates["password_hash"] = new_hash
                elif field == "is_admin":
                    if not current.is_admin:
                        logger.warning("Non-admin user %s attempted to change is_admin", current.id)
                        raise Forbidden()
                    if value is not None:
                        updates["is_admin"] = bool(value)
                else:
                    logger.debug("Ignoring unknown patch field %r", field)

            updates["updated_at"] = self._now_iso()
            try:
                found = self.store.update_user(target_id, **updates)
            except IntegrityError as exc:
                raise Conflict() from exc
            if not found:
                raise NotFound()
            updated = self.store.get_by_id(target_id)

        if updated is None:
            raise NotFound()
        return PublicUser.from_user(updated)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, target_id: str, caller_id: str) -> None:
        """Remove a user record.

        Self-deletion is allowed for any role. Deleting someone else requires
        the caller to be an existing admin.

        Raises:
            NotFound: the caller (for cross-user deletes) or the target is missing.
            Forbidden: cross-user delete by a non-admin.
        """
        with self._write_lock:
            if target_id != caller_id:
                caller = self.store.get_by_id(caller_id)
                if caller is None:
                    raise NotFound()
                if not caller.is_admin:
                    logger.warning("Non-admin user %s attempted to delete user %s", caller_id, target_id)
                    raise Forbidden()
            if not self.store.delete_user(target_id):
                raise NotFound()
        logger.info("Deleted user %s (by %s)", target_id, caller_id)
