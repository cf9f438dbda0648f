"""
auth/errors.py -- Failure taxonomy for the auth chain and user services.

Every failure the services can report is one of four terminal, non-retryable
conditions. Each carries the HTTP status it maps to, a machine-readable code,
and a human message. api/main.py renders them into the shared ErrorResponse
envelope; nothing in auth/ knows about FastAPI responses.

Messages are deliberately coarse. A bad password and an unknown email share
one message; a bad signature and an expired token share another.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for reportable auth and user-lifecycle failures."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AuthError):
    """Missing, invalid or expired token, or bad login credentials."""

    status_code = 401
    code = "unauthorized"
    default_message = "Missing authorization headers"


class NotFound(AuthError):
    """Token subject or target id does not match a stored user."""

    status_code = 404
    code = "not_found"
    default_message = "User not found"


class Forbidden(AuthError):
    """Role or ownership violation."""

    status_code = 403
    code = "forbidden"
    default_message = "Missing admin permissions"


class Conflict(AuthError):
    """E-mail address already belongs to another user."""

    status_code = 409
    code = "conflict"
    default_message = "E-mail already registered"
