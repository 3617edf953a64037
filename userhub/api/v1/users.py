"""User management endpoints: list, read, update and delete users behind the authorization policy."""

import logging
from typing import Annotated, Any, cast

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from userhub.api.v1.auth import get_optional_user
from userhub.core.database import get_db
from userhub.schemas.auth import TokenClaims
from userhub.schemas.users import (
    Role,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from userhub.services.authorization import (
    FORBIDDEN_MESSAGES,
    Action,
    Decision,
    authorize,
    required_actions,
)
from userhub.services.users import (
    EmailAlreadyExistsError,
    UserNotFoundError,
    count_admins,
    delete_user,
    get_all_users,
    get_user_by_id,
    update_user,
)

logger = logging.getLogger(__name__)
router = APIRouter()

UserId = Annotated[int, Path(gt=0, description="User id (positive integer)")]


def _enforce(actor: TokenClaims | None, target_id: int | None, actions: list[Action]) -> TokenClaims:
    """Raise 401/403 unless the policy allows every action; return the actor."""
    for action in actions:
        decision = authorize(actor, target_id or 0, action)
        if decision is Decision.UNAUTHENTICATED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Forbidden: actor_id=%s target_id=%s action=%s",
                actor.id if actor else None,
                target_id,
                action.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=FORBIDDEN_MESSAGES[action],
            )
    return cast(TokenClaims, actor)


def _internal_error(actor: TokenClaims, target_id: int | None, operation: str) -> HTTPException:
    logger.exception(
        "Error during %s: actor_id=%s target_id=%s", operation, actor.id, target_id
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_model=UsersListResponse)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[TokenClaims | None, Depends(get_optional_user)],
) -> UsersListResponse:
    """List every user (authenticated callers only)."""
    actor = _enforce(actor, None, [Action.READ])
    try:
        users = get_all_users(db)
    except Exception as e:
        raise _internal_error(actor, None, "list users") from e
    logger.info("Listed users: actor_id=%s count=%s", actor.id, len(users))
    return UsersListResponse(
        message="Successfully fetched all users",
        users=users,
        count=len(users),
    )


@router.get("/{user_id}", response_model=UserResponse)
def read_user(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[TokenClaims | None, Depends(get_optional_user)],
) -> UserResponse:
    """Return one user by id. Any authenticated caller may read any user."""
    actor = _enforce(actor, user_id, [Action.READ])
    try:
        user = get_user_by_id(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except Exception as e:
        raise _internal_error(actor, user_id, "get user") from e
    return UserResponse(message="User retrieved successfully", user=user)


@router.put("/{user_id}", response_model=UserResponse)
def edit_user(
    user_id: UserId,
    payload: Annotated[Any, Body()],
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[TokenClaims | None, Depends(get_optional_user)],
) -> UserResponse:
    """
    Update name, email and/or role.

    The policy is applied to the fields the body names before their values are
    validated, so a non-admin naming 'role' is refused with 403 even if the rest
    of the payload is malformed. A body that is not a JSON object is rejected
    only after the caller has been authenticated.
    """
    fields = set(payload) if isinstance(payload, dict) else set()
    actor = _enforce(actor, user_id, required_actions(Action.UPDATE, fields))
    if not isinstance(payload, dict):
        raise RequestValidationError(
            [{"loc": ("body",), "msg": "Request body must be a JSON object", "type": "dict_type"}]
        )
    try:
        body = UserUpdateRequest.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e

    try:
        user = update_user(db, user_id, body.changes())
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except EmailAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        ) from e
    except Exception as e:
        raise _internal_error(actor, user_id, "update user") from e
    return UserResponse(message="User updated successfully", user=user)


@router.delete("/{user_id}", response_model=UserResponse)
def remove_user(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[TokenClaims | None, Depends(get_optional_user)],
) -> UserResponse:
    """Delete a user. Users may delete themselves; admins may delete anyone."""
    actor = _enforce(actor, user_id, [Action.DELETE])
    try:
        if actor.id == user_id and actor.role is Role.ADMIN and count_admins(db) <= 1:
            # Not blocked: the deployment is left without an admin until one is created.
            logger.warning("Last remaining admin is deleting their own account: id=%s", user_id)
        user = delete_user(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except Exception as e:
        raise _internal_error(actor, user_id, "delete user") from e
    return UserResponse(message="User deleted successfully", user=user)
