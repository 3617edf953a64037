"""Password hashing and JWT signing/verification for cookie authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from userhub.core.config import settings
from userhub.schemas.auth import TokenClaims

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12


class InvalidTokenError(Exception):
    """Raised when a token is malformed, expired, badly signed, or carries unusable claims."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def sign_token(claims: TokenClaims) -> str:
    """Create a JWT carrying the user's id (as sub), email and role, valid for JWT_EXPIRE_MINUTES."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(claims.id),
        "email": claims.email,
        "role": claims.role.value,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str) -> TokenClaims:
    """
    Validate signature and expiry, then rebuild the claims.
    Raises InvalidTokenError on any failure.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired", cause=e) from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Invalid token", cause=e) from e

    try:
        return TokenClaims(
            id=int(payload["sub"]),
            email=payload.get("email"),
            role=payload.get("role"),
        )
    except (TypeError, ValueError, ValidationError) as e:
        raise InvalidTokenError("Invalid token payload", cause=e) from e
