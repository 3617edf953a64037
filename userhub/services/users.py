"""User service: read, update and delete users in the credential store."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.models import User
from userhub.schemas.users import Role, UserPublic, normalize_email

logger = logging.getLogger(__name__)

# Columns a caller may change through update_user.
UPDATABLE_FIELDS = frozenset({"name", "email", "role"})


class UserNotFoundError(Exception):
    """Raised when the referenced user does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self.message = "User not found"
        super().__init__(self.message)


class EmailAlreadyExistsError(Exception):
    """Raised when an email is already owned by another user."""

    def __init__(self, email: str) -> None:
        self.email = email
        self.message = "User with email already exists"
        super().__init__(self.message)


def _to_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def get_all_users(db: Session) -> list[UserPublic]:
    """Return every user's public projection, ordered by id."""
    users = db.query(User).order_by(User.id).all()
    return [_to_public(u) for u in users]


def get_user_by_id(db: Session, user_id: int) -> UserPublic:
    """Return one user's public projection. Raises UserNotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return _to_public(user)


def count_admins(db: Session) -> int:
    """Number of users holding the admin role."""
    return db.query(User).filter(User.role == Role.ADMIN.value).count()


def update_user(db: Session, user_id: int, updates: dict[str, Any]) -> UserPublic:
    """
    Merge name/email/role into an existing user and refresh updated_at.

    Raises UserNotFoundError if the user is absent, EmailAlreadyExistsError if
    the email changes to one owned by another user. A collision detected by the
    unique index at commit (concurrent writer) is reported the same way and the
    row is left unmodified.
    """
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
        if changes["email"] != user.email and _email_taken(db, changes["email"], exclude_id=user_id):
            raise EmailAlreadyExistsError(changes["email"])
    if "role" in changes:
        changes["role"] = Role(changes["role"]).value

    for field, value in changes.items():
        setattr(user, field, value)
    user.updated_at = datetime.now(UTC)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if "email" in changes:
            raise EmailAlreadyExistsError(changes["email"]) from e
        raise
    db.refresh(user)

    logger.info("User updated: id=%s fields=%s", user_id, sorted(changes))
    return _to_public(user)


def delete_user(db: Session, user_id: int) -> UserPublic:
    """Delete a user and return the deleted row's public projection. Raises UserNotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    deleted = _to_public(user)
    db.delete(user)
    db.commit()

    logger.info("User deleted: id=%s", user_id)
    return deleted
