"""Authorization: resolve a bearer token to its user and gate privileged operations by role."""

import logging

from app.schemas.auth import AuthErrorKind, AuthorizationResult, Role
from app.services.credential_store import CredentialStore, StorageError

logger = logging.getLogger(__name__)

MSG_TOKEN_MISSING = "Token is required"
MSG_NOT_FOUND = "Invalid token"
MSG_UNAUTHORIZED = "Unauthorized user"
MSG_STORAGE = "Authorization is temporarily unavailable"


def parse_role(value: str | None) -> Role | None:
    """Map a stored role string to Role; unknown tags grant nothing."""
    try:
        return Role(value)
    except ValueError:
        logger.warning("Unknown role tag on user record", extra={"role": value})
        return None


def _storage_failure(e: StorageError) -> AuthorizationResult:
    logger.error("Authorization failed: %s", e.message, extra={"stage": "storage"})
    return AuthorizationResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)


def resolve_user(store: CredentialStore, token: str | None) -> AuthorizationResult:
    """Return the id of the user that owns token (exact match), or token_missing / not_found."""
    if not token:
        return AuthorizationResult(error=AuthErrorKind.TOKEN_MISSING, message=MSG_TOKEN_MISSING)
    try:
        record = store.find_token_by_value(token)
    except StorageError as e:
        return _storage_failure(e)
    if record is None:
        return AuthorizationResult(error=AuthErrorKind.NOT_FOUND, message=MSG_NOT_FOUND)
    return AuthorizationResult(user_id=record.user_id)


def require_role(store: CredentialStore, token: str | None, role: Role) -> AuthorizationResult:
    """
    Resolve token, then require the owning user's role to equal role.

    Failures from resolve_user propagate unchanged. A valid token whose user has a
    different role yields unauthorized (still carrying the resolved user_id).
    """
    resolved = resolve_user(store, token)
    if not resolved.ok:
        return resolved
    try:
        user = store.find_user_by_id(resolved.user_id)
    except StorageError as e:
        return _storage_failure(e)
    if user is None:
        return AuthorizationResult(error=AuthErrorKind.NOT_FOUND, message=MSG_NOT_FOUND)

    user_role = parse_role(user.role)
    if user_role is not role:
        logger.info(
            "Role check denied",
            extra={"user_id": user.id, "required_role": role.value},
        )
        return AuthorizationResult(
            user_id=user.id,
            role=user_role,
            error=AuthErrorKind.UNAUTHORIZED,
            message=MSG_UNAUTHORIZED,
        )
    return AuthorizationResult(user_id=user.id, role=user_role)
