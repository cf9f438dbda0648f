"""
api/routes/users.py -- User registration and user management REST endpoints.

Routes:
  POST   /users           -- register (public)
  GET    /users           -- list all users (token + existing user + admin)
  GET    /users/profile   -- caller's own record (token + existing user)
  PATCH  /users/{user_id} -- partial update of the caller's own record (token + existing user)
  DELETE /users/{user_id} -- delete self, or anyone as admin (token only)

Endpoints that hash passwords are plain `def` so FastAPI runs them in its
threadpool; bcrypt's cost never blocks the event loop.

Failures are raised as auth.errors.AuthError subclasses and rendered by the
exception handler in api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import UserCreate, UserPatch, UserResponse
from auth.dependencies import TokenContext, UserContext, require_admin, require_existing_user, require_token
from auth.users import UserLifecycleService

# Auth policy:
# - POST   /users:            public -- registration needs no prior auth
# - GET    /users:            require_admin
# - GET    /users/profile:    require_existing_user
# - PATCH  /users/{user_id}:  require_existing_user + self check in service
# - DELETE /users/{user_id}:  require_token + self/admin check in service
router = APIRouter()


def _service(request: Request) -> UserLifecycleService:
    return request.app.state.users


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(request: Request, body: UserCreate) -> UserResponse:
    """Register a new user. 409 if the e-mail is already registered."""
    created = _service(request).create(
        name=body.name,
        email=body.email,
        password=body.password,
        is_admin=body.is_admin,
    )
    return UserResponse.from_public(created)


@router.get("/users", response_model=list[UserResponse])
def list_users(request: Request, _caller: UserContext = Depends(require_admin)) -> list[UserResponse]:
    """List every user. Admin only."""
    return [UserResponse.from_public(u) for u in _service(request).list_users()]


@router.get("/users/profile", response_model=UserResponse)
def profile(
    request: Request,
    token_ctx: TokenContext = Depends(require_token),
    _caller: UserContext = Depends(require_existing_user),
) -> UserResponse:
    """Return the caller's own record."""
    return UserResponse.from_public(_service(request).retrieve_self(token_ctx.token))


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    request: Request,
    user_id: str,
    body: UserPatch,
    caller: UserContext = Depends(require_existing_user),
) -> UserResponse:
    """Partially update the caller's own record.

    404 if user_id is not the caller's id; 403 if a non-admin sends isAdmin.
    """
    updated = _service(request).update(user_id, caller, body.to_patch())
    return UserResponse.from_public(updated)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(request: Request, user_id: str, ctx: TokenContext = Depends(require_token)) -> Response:
    """Delete a user. Self-delete for anyone; cross-user delete for admins only."""
    _service(request).delete(user_id, ctx.subject)
    return Response(status_code=204)
