"""Shared in-memory SQLite database for service and API tests."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from userhub.core.security import hash_password
from userhub.models import Base, User


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with the schema created; one connection shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    name: str = "Jane",
    email: str = "jane@x.com",
    password: str = "secret123",
    role: str = "user",
) -> User:
    """Insert a user row directly, bypassing the services."""
    user = User(name=name, email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
