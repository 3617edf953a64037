"""ORM model for application users (credentials and role)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from userhub.models.base import Base


class User(Base):
    """
    User account for cookie-based JWT authentication and role-based access control.

    email is stored lower-cased; uniqueness is enforced by the index.
    role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
