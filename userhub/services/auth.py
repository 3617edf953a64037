"""Auth service: register users and check credentials."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userhub.core.security import hash_password, verify_password
from userhub.models import User
from userhub.schemas.users import Role, UserPublic, normalize_email
from userhub.services.users import EmailAlreadyExistsError

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Raised when the email is unknown or the password does not match."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        self.message = message
        super().__init__(message)


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> UserPublic:
    """Persist a new user with a hashed password. Raises EmailAlreadyExistsError."""
    email = normalize_email(email)
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise EmailAlreadyExistsError(email)

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=Role(role).value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyExistsError(email) from e
    db.refresh(user)

    logger.info("User created: id=%s role=%s", user.id, user.role)
    return UserPublic.model_validate(user)


def authenticate_user(db: Session, email: str, password: str) -> UserPublic:
    """Return the user for a matching email/password pair. Raises InvalidCredentialsError."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    return UserPublic.model_validate(user)
