"""ORM models for accounts and the bearer tokens issued to them."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from app.models.base import Base


class User(Base):
    """
    Registered account.

    email is stored normalized (stripped, lower-cased) and is unique.
    role: 'admin' or 'user'; registration always creates 'user'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Token(Base):
    """Opaque bearer token minted on login. Many tokens may belong to one user; none expire."""

    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    value = Column(String(128), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    issued_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
