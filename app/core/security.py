"""Password hashing and opaque bearer token generation."""

import secrets
from functools import lru_cache

import bcrypt

from app.core.config import settings

# bcrypt only looks at the first 72 bytes of the secret.
BCRYPT_MAX_BYTES = 72

# Max lengths for registration input validation.
EMAIL_MAX_LEN = 255
FULL_NAME_MAX_LEN = 255
# Registration rejects longer secrets instead of letting bcrypt truncate them.
PASSWORD_MAX_BYTES = BCRYPT_MAX_BYTES


def is_utf8_encodable(text: str) -> bool:
    """False for text carrying lone surrogates (valid in JSON, not encodable for bcrypt or the DB)."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class CredentialFatalError(Exception):
    """Raised when the entropy source or the hashing primitive is unavailable. Not retryable."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _secret_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password with a fresh random salt. Do not store plain passwords."""
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    try:
        salt = bcrypt.gensalt(rounds=cost)
        return bcrypt.hashpw(_secret_bytes(plain_password), salt).decode("utf-8")
    except (NotImplementedError, OSError) as e:
        raise CredentialFatalError("Password hashing unavailable", cause=e) from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes verify as False."""
    if not isinstance(plain_password, str) or not isinstance(hashed, str):
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Fixed hash verified against when the account does not exist, so both paths cost one bcrypt run."""
    return hash_password(secrets.token_urlsafe(16))


def generate_token(nbytes: int | None = None) -> str:
    """Return an opaque bearer token: nbytes (default TOKEN_BYTES) of CSPRNG output as hex."""
    size = nbytes if nbytes is not None else settings.TOKEN_BYTES
    try:
        return secrets.token_hex(size)
    except (NotImplementedError, OSError) as e:
        raise CredentialFatalError("Secure random source unavailable", cause=e) from e
