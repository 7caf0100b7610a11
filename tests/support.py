"""Shared fixtures for tests: credential stores backed by a fresh in-memory SQLite database."""

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import build_engine
from app.models import Base
from app.services.credential_store import CredentialStore


def memory_session() -> Session:
    """Session on a fresh in-memory database with all tables created."""
    engine = build_engine("sqlite://", timeout_sec=5.0)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)()


def memory_store() -> CredentialStore:
    return CredentialStore(memory_session())
