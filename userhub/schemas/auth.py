"""Request/response schemas for auth endpoints and token claims."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from userhub.schemas.users import Role, UserPublic, normalize_email


class SignUpRequest(BaseModel):
    """Registration payload. Public signup always creates a 'user' account."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=2, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, max_length=128, description="Password")

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_strings(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class TokenClaims(BaseModel):
    """Identity asserted by a verified token (id, email, role)."""

    id: int = Field(..., gt=0)
    email: str
    role: Role


class AuthResponse(BaseModel):
    """Success envelope for signup/signin."""

    message: str
    user: UserPublic


class MessageResponse(BaseModel):
    """Success envelope with only a message."""

    message: str
