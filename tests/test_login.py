"""Unit tests for app.services.login: credential checks, token minting, collision retry, failures."""

import unittest
from unittest.mock import MagicMock, patch

from app.core.config import settings
from app.core.security import CredentialFatalError
from app.schemas.auth import AuthErrorKind, Role
from app.services.authorization import resolve_user
from app.services.credential_store import StorageError
from app.services.login import MAX_TOKEN_ATTEMPTS, MSG_INVALID, login_user
from app.services.registration import provision_user, register_user

from support import memory_store


class _StoreWithAlice(unittest.TestCase):
    def setUp(self) -> None:
        patcher = patch.object(settings, "BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.store = memory_store()
        self.addCleanup(self.store.session.close)
        self.alice_id = register_user(self.store, "a@x.com", "pw123", "Alice").user_id


class TestLoginSuccess(_StoreWithAlice):
    def test_returns_token_user_id_and_role(self) -> None:
        result = login_user(self.store, "a@x.com", "pw123")
        self.assertTrue(result.ok)
        self.assertEqual(result.user_id, self.alice_id)
        self.assertEqual(result.role, Role.USER)
        self.assertEqual(len(result.token), settings.TOKEN_BYTES * 2)

    def test_token_resolves_to_user(self) -> None:
        result = login_user(self.store, "a@x.com", "pw123")
        self.assertEqual(resolve_user(self.store, result.token).user_id, self.alice_id)

    def test_email_lookup_is_case_insensitive(self) -> None:
        self.assertTrue(login_user(self.store, " A@X.COM", "pw123").ok)

    def test_two_logins_issue_two_valid_tokens(self) -> None:
        first = login_user(self.store, "a@x.com", "pw123")
        second = login_user(self.store, "a@x.com", "pw123")
        self.assertNotEqual(first.token, second.token)
        self.assertEqual(resolve_user(self.store, first.token).user_id, self.alice_id)
        self.assertEqual(resolve_user(self.store, second.token).user_id, self.alice_id)

    def test_admin_role_reported(self) -> None:
        provision_user(self.store, "root@x.com", "pw123", "Root", Role.ADMIN)
        self.assertEqual(login_user(self.store, "root@x.com", "pw123").role, Role.ADMIN)

    def test_token_not_in_repr(self) -> None:
        result = login_user(self.store, "a@x.com", "pw123")
        self.assertNotIn(result.token, repr(result))


class TestLoginRejected(_StoreWithAlice):
    def test_wrong_password(self) -> None:
        result = login_user(self.store, "a@x.com", "wrong")
        self.assertEqual(result.error, AuthErrorKind.INVALID_CREDENTIALS)
        self.assertIsNone(result.token)

    def test_unknown_email_uses_same_message(self) -> None:
        unknown = login_user(self.store, "nobody@x.com", "pw123")
        wrong = login_user(self.store, "a@x.com", "wrong")
        self.assertEqual(unknown.error, AuthErrorKind.INVALID_CREDENTIALS)
        self.assertEqual(unknown.message, wrong.message)
        self.assertEqual(unknown.message, MSG_INVALID)

    def test_unknown_email_still_runs_verification(self) -> None:
        with patch("app.services.login.verify_password", return_value=False) as verify:
            login_user(self.store, "nobody@x.com", "pw123")
        verify.assert_called_once()

    def test_missing_fields(self) -> None:
        for email, password in [(None, "pw123"), ("a@x.com", None), ("", "pw123"), ("a@x.com", "")]:
            with self.subTest(email=email, password=password):
                self.assertEqual(
                    login_user(self.store, email, password).error,
                    AuthErrorKind.MISSING_FIELD,
                )

    def test_failed_login_issues_no_token(self) -> None:
        factory = MagicMock(return_value="never-used")
        login_user(self.store, "a@x.com", "wrong", token_factory=factory)
        factory.assert_not_called()

    def test_unencodable_input_is_invalid_credentials(self) -> None:
        store = MagicMock()
        for email, password in [("a\ud800@x.com", "pw123"), ("a@x.com", "pw\ud800")]:
            with self.subTest(email=email, password=password):
                result = login_user(store, email, password)
                self.assertEqual(result.error, AuthErrorKind.INVALID_CREDENTIALS)
                self.assertEqual(result.message, MSG_INVALID)
        store.find_user_by_email.assert_not_called()


class TestTokenCollision(_StoreWithAlice):
    """A colliding token value is regenerated once; a second collision is a storage error."""

    def setUp(self) -> None:
        super().setUp()
        self.store.insert_token("taken", self.alice_id)

    def test_single_collision_is_retried(self) -> None:
        factory = MagicMock(side_effect=["taken", "fresh"])
        with self.assertLogs("app.services.login", level="WARNING"):
            result = login_user(self.store, "a@x.com", "pw123", token_factory=factory)
        self.assertTrue(result.ok)
        self.assertEqual(result.token, "fresh")
        self.assertEqual(resolve_user(self.store, "fresh").user_id, self.alice_id)

    def test_repeated_collision_fails_after_one_retry(self) -> None:
        factory = MagicMock(side_effect=["taken", "taken", "never-used"])
        with self.assertLogs("app.services.login", level="ERROR"):
            result = login_user(self.store, "a@x.com", "pw123", token_factory=factory)
        self.assertEqual(result.error, AuthErrorKind.STORAGE_ERROR)
        self.assertEqual(factory.call_count, MAX_TOKEN_ATTEMPTS)


class TestLoginFailures(unittest.TestCase):
    def test_lookup_storage_error(self) -> None:
        store = MagicMock()
        store.find_user_by_email.side_effect = StorageError("find_user_by_email failed")
        with self.assertLogs("app.services.login", level="ERROR"):
            result = login_user(store, "a@x.com", "pw123")
        self.assertEqual(result.error, AuthErrorKind.STORAGE_ERROR)
        self.assertNotEqual(result.error, AuthErrorKind.INVALID_CREDENTIALS)

    def test_token_insert_storage_error(self) -> None:
        store = MagicMock()
        store.find_user_by_email.return_value = MagicMock(id=1, role="user", password_hash="h")
        store.insert_token.side_effect = StorageError("insert_token failed")
        with patch("app.services.login.verify_password", return_value=True):
            with self.assertLogs("app.services.login", level="ERROR"):
                result = login_user(store, "a@x.com", "pw123")
        self.assertEqual(result.error, AuthErrorKind.STORAGE_ERROR)
        store.insert_token.assert_called_once()

    def test_random_source_failure(self) -> None:
        store = MagicMock()
        store.find_user_by_email.return_value = MagicMock(id=1, role="user", password_hash="h")
        factory = MagicMock(side_effect=CredentialFatalError("Secure random source unavailable"))
        with patch("app.services.login.verify_password", return_value=True):
            with self.assertLogs("app.services.login", level="CRITICAL"):
                result = login_user(store, "a@x.com", "pw123", token_factory=factory)
        self.assertEqual(result.error, AuthErrorKind.STORAGE_ERROR)
        store.insert_token.assert_not_called()


if __name__ == "__main__":
    unittest.main()
