"""Registration, login and the bearer-token auth dependencies (get_current_user, require_admin)."""

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auth import (
    AuthErrorKind,
    AuthorizationResult,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    Role,
)
from app.schemas.envelope import Envelope
from app.services.authorization import MSG_NOT_FOUND, parse_role, require_role, resolve_user
from app.services.credential_store import CredentialStore, StorageError
from app.services.login import login_user
from app.services.registration import register_user

router = APIRouter()
security = HTTPBearer(auto_error=False)

STATUS_BY_ERROR: dict[AuthErrorKind, int] = {
    AuthErrorKind.MISSING_FIELD: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.INVALID_FIELD: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.DUPLICATE_IDENTITY: status.HTTP_409_CONFLICT,
    AuthErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.TOKEN_MISSING: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    AuthErrorKind.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Token problems ask the client to authenticate again.
_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _raise_for(error: AuthErrorKind, message: str) -> NoReturn:
    headers = (
        _BEARER_CHALLENGE
        if error in (AuthErrorKind.TOKEN_MISSING, AuthErrorKind.NOT_FOUND)
        else None
    )
    raise HTTPException(status_code=STATUS_BY_ERROR[error], detail=message, headers=headers)


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    """Dependency: credential store bound to the request's DB session."""
    return CredentialStore(db)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Dependency: token from 'Authorization: Bearer <token>', or None when absent."""
    if credentials is None:
        return None
    return credentials.credentials.strip() or None


def get_current_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> CurrentUser:
    """Dependency: require a resolvable bearer token and return its user. Raises 401 otherwise."""
    resolved = resolve_user(store, token)
    if not resolved.ok:
        _raise_for(resolved.error, resolved.message)
    try:
        user = store.find_user_by_id(resolved.user_id)
    except StorageError:
        _raise_for(AuthErrorKind.STORAGE_ERROR, "Authorization is temporarily unavailable")
    if user is None or parse_role(user.role) is None:
        _raise_for(AuthErrorKind.NOT_FOUND, MSG_NOT_FOUND)
    return CurrentUser.model_validate(user)


def require_admin(
    token: Annotated[str | None, Depends(get_bearer_token)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> AuthorizationResult:
    """Dependency: require a token owned by an 'admin' user. 401 for bad tokens, 403 for other roles."""
    result = require_role(store, token, Role.ADMIN)
    if not result.ok:
        _raise_for(result.error, result.message)
    return result


@router.post("/register", response_model=Envelope, response_model_exclude_none=True)
def register(
    body: RegisterRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> Envelope:
    """Create a 'user'-role account. Does not log the user in."""
    result = register_user(store, body.email, body.password, body.full_name)
    if not result.ok:
        _raise_for(result.error, result.message)
    return Envelope(success=True, message=result.message, data={"user_id": result.user_id})


@router.post("/login", response_model=Envelope, response_model_exclude_none=True)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> Envelope:
    """
    Authenticate with email and password; returns a new opaque bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = login_user(store, body.email, body.password)
    if not result.ok:
        _raise_for(result.error, result.message)
    return Envelope(
        success=True,
        message=result.message,
        token=result.token,
        data={"user_id": result.user_id, "role": result.role.value if result.role else None},
    )


@router.get("/me", response_model=Envelope, response_model_exclude_none=True)
def me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> Envelope:
    """Return the account that owns the presented token."""
    return Envelope(
        success=True,
        message="Current user fetched successfully",
        data=current_user.model_dump(mode="json"),
    )
