"""Request schemas and service outcomes for registration, login and authorization."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Authorization tag stored on a user."""

    USER = "user"
    ADMIN = "admin"


class AuthErrorKind(str, Enum):
    """Why a credential operation did not succeed."""

    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    DUPLICATE_IDENTITY = "duplicate_identity"
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_MISSING = "token_missing"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    STORAGE_ERROR = "storage_error"


class RegisterRequest(BaseModel):
    """Registration body. Fields are optional here so absence is reported as missing_field, not a 422."""

    email: str | None = Field(default=None, description="Email (identity key)")
    password: str | None = Field(default=None, description="Password")
    full_name: str | None = Field(default=None, description="Display name")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Email")
    password: str | None = Field(default=None, description="Password")


class RegistrationResult(BaseModel):
    user_id: int | None = None
    error: AuthErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class LoginResult(BaseModel):
    """Outcome of a login. token is a secret; never log it."""

    token: str | None = Field(default=None, repr=False)
    user_id: int | None = None
    role: Role | None = None
    error: AuthErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class AuthorizationResult(BaseModel):
    """
    Outcome of resolving a bearer token, optionally checked against a role.

    error is None when the token resolved (and, for role checks, the role matched).
    """

    user_id: int | None = None
    role: Role | None = None
    error: AuthErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class CurrentUser(BaseModel):
    """Authenticated user for dependency injection and GET /auth/me."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    role: Role
