"""Pydantic request/response schemas."""

from userhub.schemas.auth import (
    AuthResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    TokenClaims,
)
from userhub.schemas.errors import ErrorResponse, FieldError, format_validation_errors
from userhub.schemas.health import HealthResponse
from userhub.schemas.users import (
    Role,
    UserPublic,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "MessageResponse",
    "Role",
    "SignInRequest",
    "SignUpRequest",
    "TokenClaims",
    "UserPublic",
    "UserResponse",
    "UserUpdateRequest",
    "UsersListResponse",
    "format_validation_errors",
]
