"""
auth/models.py -- Domain dataclasses for user identity.

Pattern: Data class (pure data container, zero logic beyond projection).
Stores and services do the work; api/models.py owns the wire format.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A stored identity and profile record.

    id is a UUID4 string assigned at creation and never changed or reused.
    email is unique across the store. password_hash is a bcrypt digest and must
    never leave the service layer -- use PublicUser for anything returned to a
    caller.

    created_at / updated_at are ISO 8601 UTC strings. created_at is immutable;
    updated_at is refreshed on every mutation.
    """

    id: str
    name: str
    email: str
    password_hash: str
    is_admin: bool = False
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class PublicUser:
    """The caller-visible projection of a User. Has no password_hash field."""

    id: str
    name: str
    email: str
    is_admin: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> PublicUser:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
