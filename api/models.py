"""
API request and response models for UserHub REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Wire names are camelCase (isAdmin, createdAt, updatedAt). Python code uses the
snake_case field names; populate_by_name lets either form in on requests.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import PublicUser

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Request body for POST /users."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    # bcrypt only reads the first 72 bytes; 255 keeps inputs bounded.
    password: str = Field(min_length=1, max_length=255)
    is_admin: bool = False


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = Field(max_length=255)
    password: str = Field(max_length=255)


class UserPatch(BaseModel):
    """Request body for PATCH /users/{id}.

    Every field is optional. Only fields the client actually sent reach the
    service (model_dump(exclude_unset=True)); unknown keys are dropped here.
    An explicit null isAdmin is kept so the admin check still sees the key.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    password: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_admin: Optional[bool] = None

    def to_patch(self) -> dict:
        """Return the fields the client set, skipping explicit nulls except is_admin."""
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None or k == "is_admin"
        }


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """A user as returned to API clients. Never carries the password hash."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    email: str
    is_admin: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_public(cls, user: PublicUser) -> "UserResponse":
        """Build a UserResponse from the service-layer PublicUser."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    """Response body for POST /login."""

    model_config = ConfigDict(frozen=True)

    token: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
