"""Credential store: users and issued tokens behind a SQLAlchemy session."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Token, User

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the backing database fails or times out. cause is for logs, not clients."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class UniqueViolationError(Exception):
    """Raised when an insert collides with a unique constraint (users.email or tokens.value)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CredentialStore:
    """
    Lookup/insert operations for users and tokens.

    Uniqueness is enforced by the database constraints, not by check-then-insert,
    so concurrent inserts of the same email or token value surface as UniqueViolationError.
    Each insert commits on its own; a failed insert rolls the session back.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fail(self, operation: str, e: SQLAlchemyError) -> StorageError:
        self.session.rollback()
        logger.error(
            "Credential store operation failed",
            extra={"operation": operation, "error_type": type(e).__name__},
            exc_info=e,
        )
        return StorageError(f"{operation} failed", cause=e)

    def find_user_by_email(self, email: str) -> User | None:
        try:
            return self.session.scalars(select(User).where(User.email == email)).first()
        except SQLAlchemyError as e:
            raise self._fail("find_user_by_email", e) from e

    def find_user_by_id(self, user_id: int) -> User | None:
        try:
            return self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._fail("find_user_by_id", e) from e

    def insert_user(self, email: str, password_hash: str, full_name: str, role: str) -> int:
        """Persist a new user and return its id."""
        user = User(email=email, password_hash=password_hash, full_name=full_name, role=role)
        try:
            self.session.add(user)
            self.session.flush()
            user_id = user.id
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UniqueViolationError("email already registered") from e
        except SQLAlchemyError as e:
            raise self._fail("insert_user", e) from e
        return user_id

    def find_token_by_value(self, value: str) -> Token | None:
        try:
            return self.session.scalars(select(Token).where(Token.value == value)).first()
        except SQLAlchemyError as e:
            raise self._fail("find_token_by_value", e) from e

    def insert_token(self, value: str, user_id: int) -> None:
        try:
            self.session.add(Token(value=value, user_id=user_id))
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UniqueViolationError("token value already issued") from e
        except SQLAlchemyError as e:
            raise self._fail("insert_token", e) from e
