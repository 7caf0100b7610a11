"""Registration: validate input, hash the password, persist the user."""

import logging

from app.core.security import (
    EMAIL_MAX_LEN,
    FULL_NAME_MAX_LEN,
    PASSWORD_MAX_BYTES,
    CredentialFatalError,
    hash_password,
    is_utf8_encodable,
)
from app.schemas.auth import AuthErrorKind, RegistrationResult, Role
from app.services.credential_store import CredentialStore, StorageError, UniqueViolationError

logger = logging.getLogger(__name__)

MSG_REGISTERED = "User registered successfully"
MSG_MISSING = "email, password and full_name are required"
MSG_DUPLICATE = "Email is already registered"
MSG_STORAGE = "Registration is temporarily unavailable"


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively: stored and looked up stripped and lower-cased."""
    return email.strip().lower()


def _invalid_field_message(email: str, password: str, full_name: str) -> str | None:
    for name, value in (("email", email), ("password", password), ("full_name", full_name)):
        if not is_utf8_encodable(value):
            return f"{name} contains characters that cannot be encoded as UTF-8."
    if len(email) > EMAIL_MAX_LEN or "@" not in email:
        return "Invalid email address."
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return f"Password must be at most {PASSWORD_MAX_BYTES} bytes."
    if len(full_name) > FULL_NAME_MAX_LEN:
        return f"full_name must be at most {FULL_NAME_MAX_LEN} characters."
    return None


def provision_user(
    store: CredentialStore,
    email: str | None,
    password: str | None,
    full_name: str | None,
    role: Role,
) -> RegistrationResult:
    """
    Create a user with the given role. Shared by self-registration and the admin CLI.

    Validation happens before any storage access. A duplicate email is reported as
    duplicate_identity whether it is caught by the lookup or by the unique constraint
    on insert (concurrent registration of the same email).
    """
    if not email or not email.strip() or not password or not full_name or not full_name.strip():
        return RegistrationResult(error=AuthErrorKind.MISSING_FIELD, message=MSG_MISSING)

    email = normalize_email(email)
    full_name = full_name.strip()
    invalid = _invalid_field_message(email, password, full_name)
    if invalid:
        return RegistrationResult(error=AuthErrorKind.INVALID_FIELD, message=invalid)

    try:
        if store.find_user_by_email(email) is not None:
            return RegistrationResult(error=AuthErrorKind.DUPLICATE_IDENTITY, message=MSG_DUPLICATE)
        password_hash = hash_password(password)
        user_id = store.insert_user(email, password_hash, full_name, role.value)
    except UniqueViolationError:
        return RegistrationResult(error=AuthErrorKind.DUPLICATE_IDENTITY, message=MSG_DUPLICATE)
    except StorageError as e:
        logger.error("Registration failed: %s", e.message, extra={"stage": "storage"})
        return RegistrationResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)
    except CredentialFatalError as e:
        logger.critical("Registration aborted: %s", e.message, exc_info=e.cause)
        return RegistrationResult(error=AuthErrorKind.STORAGE_ERROR, message=MSG_STORAGE)

    logger.info("User registered", extra={"user_id": user_id, "role": role.value})
    return RegistrationResult(user_id=user_id, message=MSG_REGISTERED)


def register_user(
    store: CredentialStore,
    email: str | None,
    password: str | None,
    full_name: str | None,
) -> RegistrationResult:
    """Self-registration. Always creates a 'user'-role account and issues no token."""
    return provision_user(store, email, password, full_name, Role.USER)
