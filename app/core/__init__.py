"""Core configuration, database access and credential primitives."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.security import CredentialFatalError, generate_token, hash_password, verify_password

__all__ = [
    "CredentialFatalError",
    "generate_token",
    "get_db",
    "get_settings",
    "hash_password",
    "settings",
    "verify_password",
]
