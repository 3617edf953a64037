"""Pydantic schemas for users: role enum, public projection, update payload and response envelopes."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class Role(str, Enum):
    """Closed set of roles a user may hold."""

    USER = "user"
    ADMIN = "admin"


EMAIL_MAX_LEN = 255


def normalize_email(value: str) -> str:
    """Emails are compared case-insensitively; store and look up the lower-cased form."""
    normalized = value.strip().lower()
    if len(normalized) > EMAIL_MAX_LEN:
        raise ValueError(f"Email must not exceed {EMAIL_MAX_LEN} characters")
    return normalized


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


class UserPublic(BaseModel):
    """Public projection of a user (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")


class UserUpdateRequest(BaseModel):
    """Partial update for a user; at least one of name, email or role must be provided."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=2, max_length=255)
    email: EmailStr | None = None
    role: Role | None = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_strings(cls, v: object) -> object:
        return _strip(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v is not None else None

    @model_validator(mode="after")
    def require_one_field(self) -> "UserUpdateRequest":
        if self.name is None and self.email is None and self.role is None:
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict[str, object]:
        """Fields the client actually set, without the unset ones."""
        return self.model_dump(exclude_none=True)


class UserResponse(BaseModel):
    """Success envelope carrying a single user."""

    message: str
    user: UserPublic


class UsersListResponse(BaseModel):
    """Success envelope for GET /users."""

    message: str
    users: list[UserPublic]
    count: int
