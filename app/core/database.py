"""Database engine and session management."""

import math
from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings


def build_engine(url: str, timeout_sec: float, echo: bool = False) -> Engine:
    """
    Create an engine whose connection checkout and statements are bounded by timeout_sec.

    PostgreSQL gets connect_timeout and statement_timeout; SQLite gets its busy timeout.
    In-memory SQLite shares one connection across threads so every session sees the same data.
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {
            "connect_args": {"check_same_thread": False, "timeout": timeout_sec},
        }
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=timeout_sec,
        echo=echo,
        connect_args={
            "connect_timeout": max(1, math.ceil(timeout_sec)),
            "options": f"-c statement_timeout={int(timeout_sec * 1000)}",
        },
    )


engine = build_engine(settings.DATABASE_URL, settings.DB_TIMEOUT_SEC, echo=settings.DEBUG)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
