"""Unit tests for app.core.security: bcrypt hashing/verification and opaque token generation."""

import string
import unittest
from unittest.mock import patch

from app.core.config import settings
from app.core.security import (
    CredentialFatalError,
    generate_token,
    hash_password,
    verify_password,
)


class TestHashPassword(unittest.TestCase):
    """hash_password salts every call; verify_password checks against the embedded salt."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertNotEqual(hashed, "pw123")
        self.assertTrue(verify_password("pw123", hashed))

    def test_same_secret_gives_different_hashes(self) -> None:
        first = hash_password("pw123", rounds=4)
        second = hash_password("pw123", rounds=4)
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("pw123", first))
        self.assertTrue(verify_password("pw123", second))

    def test_wrong_secret_does_not_verify(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertFalse(verify_password("wrong", hashed))

    def test_default_rounds_come_from_settings(self) -> None:
        with patch.object(settings, "BCRYPT_ROUNDS", 5):
            hashed = hash_password("pw123")
        self.assertTrue(hashed.startswith("$2b$05$"))

    def test_gensalt_failure_is_fatal(self) -> None:
        with patch("app.core.security.bcrypt.gensalt", side_effect=NotImplementedError("no urandom")):
            with self.assertRaises(CredentialFatalError) as ctx:
                hash_password("pw123", rounds=4)
        self.assertIsInstance(ctx.exception.cause, NotImplementedError)


class TestVerifyPasswordMalformed(unittest.TestCase):
    """verify_password never raises on malformed input; it returns False."""

    def test_garbage_hash(self) -> None:
        self.assertFalse(verify_password("pw123", "not-a-bcrypt-hash"))

    def test_empty_hash(self) -> None:
        self.assertFalse(verify_password("pw123", ""))

    def test_none_hash(self) -> None:
        self.assertFalse(verify_password("pw123", None))  # type: ignore[arg-type]


class TestGenerateToken(unittest.TestCase):
    """generate_token returns hex strings carrying TOKEN_BYTES of entropy."""

    def test_default_length_is_hex_of_token_bytes(self) -> None:
        token = generate_token()
        self.assertEqual(len(token), settings.TOKEN_BYTES * 2)
        self.assertTrue(all(c in string.hexdigits for c in token))

    def test_explicit_size(self) -> None:
        self.assertEqual(len(generate_token(48)), 96)

    def test_tokens_are_distinct(self) -> None:
        tokens = {generate_token() for _ in range(200)}
        self.assertEqual(len(tokens), 200)

    def test_random_source_failure_is_fatal(self) -> None:
        with patch("app.core.security.secrets.token_hex", side_effect=OSError("entropy")):
            with self.assertRaises(CredentialFatalError):
                generate_token()


if __name__ == "__main__":
    unittest.main()
