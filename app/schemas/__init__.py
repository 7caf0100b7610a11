"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthErrorKind,
    AuthorizationResult,
    CurrentUser,
    LoginRequest,
    LoginResult,
    RegisterRequest,
    RegistrationResult,
    Role,
)
from app.schemas.catalog import CategoryCreate, CategoryOut, ProductOut
from app.schemas.envelope import Envelope
from app.schemas.health import HealthData

__all__ = [
    "AuthErrorKind",
    "AuthorizationResult",
    "CategoryCreate",
    "CategoryOut",
    "CurrentUser",
    "Envelope",
    "HealthData",
    "LoginRequest",
    "LoginResult",
    "ProductOut",
    "RegisterRequest",
    "RegistrationResult",
    "Role",
]
