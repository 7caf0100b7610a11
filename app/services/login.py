"""Login: verify credentials, mint an opaque bearer token, persist it."""

import logging
from collections.abc import Callable

from app.core.security import (
    CredentialFatalError,
    dummy_password_hash,
    generate_token,
    is_utf8_encodable,
    verify_password,
)
from app.schemas.auth import AuthErrorKind, LoginResult
from app.services.authorization import parse_role
from app.services.credential_store import CredentialStore, StorageError, UniqueViolationError
from app.services.registration import normalize_email

logger = logging.getLogger(__name__)

# First attempt plus one regeneration on a token value collision.
MAX_TOKEN_ATTEMPTS = 2

MSG_LOGGED_IN = "User logged in successfully"
MSG_MISSING = "email and password are required"
# One message for unknown email and wrong password, so responses do not reveal which accounts exist.
MSG_INVALID = "Invalid email or password"
MSG_STORAGE = "Login is temporarily unavailable"


def _issue_token(
    store: CredentialStore,
    user_id: int,
    token_factory: Callable[[], str],
) -> str | None:
    """Insert a fresh token for user_id; returns None when every attempt collided."""
    for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
        token = token_factory()
        try:
            store.insert_token(token, user_id)
            return token
        except UniqueViolationError:
            logger.warning(
                "Token value collision; regenerating",
                extra={"user_id": user_id, "attempt": attempt},
            )
    return None


def login_user(
    store: CredentialStore,
    email: str | None,
    password: str | None,
    token_factory: Callable[[], str] = generate_token,
) -> LoginResult:
    """
    Authenticate email/password and return a new bearer token with the user's id and role.

    Every successful login issues a new token; earlier tokens stay valid.
    """
    if not email or not email.strip() or not password:
        return LoginResult(error=AuthErrorKind.MISSING_FIELD, message=MSG_MISSING)
    # Registration never stores unencodable text, so no account can match it.
    if not is_utf8_encodable(email) or not is_utf8_encodable(password):
        return LoginResult(error=AuthErrorKind.INVALID_CREDENTIALS, message=MSG_INVALID)

    try:
        user = store.find_user_by_email(normalize_email(email))
        if user is None:
            verify_password(password, dummy_password_hash())
            return LoginResult(error=AuthErrorKind.INVALID_CREDENTIALS, message=MSG_INVALID)
        if not verify_password(password, user.password_hash):
            return LoginResult(error=AuthErrorKind.INVALID_CREDENTIALS, message=MSG_INVALID)

        user_id = user.id
        role = parse_role(user.role)
        token = _issue_token(store, user_id, token_factory)
    except StorageError as e:
        logger.error("Login failed: %s", e.message, extra={"stage": "storage"})
        return LoginResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)
    except CredentialFatalError as e:
        logger.critical("Login aborted: %s", e.message, exc_info=e.cause)
        return LoginResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)

    if token is None:
        logger.error(
            "Login failed: token value collided on every attempt",
            extra={"user_id": user_id, "attempts": MAX_TOKEN_ATTEMPTS},
        )
        return LoginResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)

    logger.info("User logged in", extra={"user_id": user_id})
    return LoginResult(token=token, user_id=user_id, role=role, message=MSG_LOGGED_IN)
