"""Sign-up/sign-in/sign-out endpoints and the token cookie dependency."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from userhub.core.config import settings
from userhub.core.database import get_db
from userhub.core.security import InvalidTokenError, sign_token, verify_token
from userhub.schemas.auth import (
    AuthResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    TokenClaims,
)
from userhub.schemas.users import UserPublic
from userhub.services.auth import InvalidCredentialsError, authenticate_user, create_user
from userhub.services.users import EmailAlreadyExistsError

logger = logging.getLogger(__name__)
router = APIRouter()
token_cookie = APIKeyCookie(name=settings.COOKIE_NAME, auto_error=False)


def set_token_cookie(response: Response, token: str) -> None:
    """Attach the signed token as an HttpOnly cookie that lives as long as the token."""
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=bool(settings.COOKIE_SECURE),
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_token_cookie(response: Response) -> None:
    """Expire the token cookie with the same attributes it was set with."""
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        httponly=True,
        secure=bool(settings.COOKIE_SECURE),
        samesite=settings.COOKIE_SAMESITE,
    )


def _issue_token(response: Response, user: UserPublic) -> None:
    token = sign_token(TokenClaims(id=user.id, email=user.email, role=user.role))
    set_token_cookie(response, token)


def get_optional_user(
    token: Annotated[str | None, Depends(token_cookie)],
) -> TokenClaims | None:
    """Dependency: claims from the token cookie, or None when there is no usable token."""
    if not token:
        return None
    try:
        return verify_token(token)
    except InvalidTokenError as e:
        logger.warning("Token verification failed: %s", e.message)
        return None


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignUpRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Register a new account (role 'user') and sign it in by setting the token cookie."""
    try:
        user = create_user(db, name=body.name, email=body.email, password=body.password)
    except EmailAlreadyExistsError as e:
        logger.info("Signup rejected, email already registered: %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        ) from e

    _issue_token(response, user)
    logger.info("User registered successfully: %s", user.email)
    return AuthResponse(message="User registered", user=user)


@router.post("/signin", response_model=AuthResponse)
def signin(
    body: SignInRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Check email/password and set the token cookie."""
    try:
        user = authenticate_user(db, email=body.email, password=body.password)
    except InvalidCredentialsError as e:
        logger.info("Sign-in failed for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e

    _issue_token(response, user)
    logger.info("User signed in successfully: %s", user.email)
    return AuthResponse(message="Sign in successful", user=user)


@router.post("/signout", response_model=MessageResponse)
def signout(response: Response) -> MessageResponse:
    """Clear the token cookie. Tokens are stateless, so nothing is revoked server side."""
    clear_token_cookie(response)
    logger.info("User signed out successfully")
    return MessageResponse(message="Sign out successful")
