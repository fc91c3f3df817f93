"""
API request and response models for Session Gate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User

# ---------------------------------------------------------------------------
# Auth -- requests
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=72)
    remember_me: bool = False


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/auth/register."""

    model_config = ConfigDict(str_strip_whitespace=True)

    display_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=72)
    password_confirmation: str = Field(max_length=72)


# ---------------------------------------------------------------------------
# Auth / users -- responses
# ---------------------------------------------------------------------------


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    display_name: str

    @classmethod
    def from_user(cls, user: User) -> "MeResponse":
        return cls(id=user.id, email=user.email, display_name=user.display_name)


class UserResponse(BaseModel):
    """One row in GET /api/v1/users. The password hash is never included."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    display_name: str
    role_id: int
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role_id=user.role_id,
            created_at=user.created_at or "",
            updated_at=user.updated_at or "",
        )


class PaginatedUsersResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: list[UserResponse]
    page: int
    page_size: int
    total: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Envelope / health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Uniform error envelope: {"error": {"code", "message", "detail"}}."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
