"""
auth/dependencies.py -- The authorization chain: three composable gates.

  1. RequireToken         -- Authorization: Bearer <token> must verify.
                             Produces TokenContext(subject, token).
  2. RequireExistingUser  -- the subject must name a stored user.
                             Produces UserContext(user); the raw subject is
                             superseded by the resolved record.
  3. RequireAdmin         -- the resolved user must have is_admin set.
                             Passes the same UserContext through.

Each gate is a pure function over the previous gate's context (check_token,
resolve_user, check_admin) so it can be tested without HTTP. The FastAPI
wrappers (require_token, require_existing_user, require_admin) chain them with
Depends() so state flows strictly gate to gate. FastAPI caches a dependency
per request, so a route that asks for both TokenContext and UserContext still
verifies the token once.

Gates raise AuthError subclasses; api/main.py renders them.

Layer rule: auth/dependencies.py may import from fastapi (for Depends/Request)
because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from auth.errors import Forbidden, NotFound, Unauthorized
from auth.models import User
from auth.store import UserStore
from auth.tokens import decode_access_token, extract_bearer_token

# ---------------------------------------------------------------------------
# Gate contexts -- immutable, replaced at each step
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenContext:
    """Output of RequireToken: the verified subject and the raw token."""

    subject: str
    token: str


@dataclass(frozen=True)
class UserContext:
    """Output of RequireExistingUser / RequireAdmin: the resolved record."""

    user: User

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------


def check_token(authorization: str | None) -> TokenContext:
    """Gate 1. Raise Unauthorized if the bearer token is absent or invalid."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthorized()
    subject = decode_access_token(token)
    if subject is None:
        raise Unauthorized()
    return TokenContext(subject=subject, token=token)


def resolve_user(store: UserStore, ctx: TokenContext) -> UserContext:
    """Gate 2. Raise NotFound if the token subject has no stored record."""
    user = store.get_by_id(ctx.subject)
    if user is None:
        raise NotFound()
    return UserContext(user=user)


def check_admin(ctx: UserContext) -> UserContext:
    """Gate 3. Raise Forbidden unless the resolved user is an admin."""
    if not ctx.is_admin:
        raise Forbidden()
    return ctx


# ---------------------------------------------------------------------------
# FastAPI wrappers
# ---------------------------------------------------------------------------


def require_token(request: Request) -> TokenContext:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.delete("/users/{user_id}")
        def route(ctx: TokenContext = Depends(require_token)): ...
    """
    return check_token(request.headers.get("Authorization"))


def require_existing_user(request: Request, ctx: TokenContext = Depends(require_token)) -> UserContext:
    """Require a valid token whose subject resolves to a stored user."""
    return resolve_user(request.app.state.user_store, ctx)


def require_admin(ctx: UserContext = Depends(require_existing_user)) -> UserContext:
    """Require a valid token, an existing user, and the admin flag."""
    return check_admin(ctx)
