"""Unit tests for password hashing utilities."""

from argon2 import PasswordHasher

from cinevault.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    needs_rehash,
    verify_password,
)


class TestHashPassword:
    """Tests for hash_password function."""

    def test_hash_password_returns_argon2id_phc_string(self):
        """Test that hash_password returns an Argon2id digest with embedded parameters."""
        hashed = hash_password("secret123")

        assert hashed.startswith("$argon2id$v=19$m=")
        assert "secret123" not in hashed

    def test_hash_password_different_for_same_input(self):
        """Test that hashing the same password twice produces different hashes (due to salt)."""
        assert hash_password("secret123") != hash_password("secret123")

    def test_hash_length_independent_of_password_length(self):
        """Test that short and long passwords produce digests of the same length."""
        assert len(hash_password("a")) == len(hash_password("a" * 1000))


class TestVerifyPassword:
    """Tests for verify_password function."""

    def test_verify_password_correct(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("secret123")
        assert verify_password("secret124", hashed) is False

    def test_verify_password_case_sensitive(self):
        hashed = hash_password("Secret123")
        assert verify_password("secret123", hashed) is False

    def test_verify_password_malformed_hash_returns_false(self):
        """Test that a corrupted digest is reported as a mismatch, not an error."""
        assert verify_password("secret123", "not-a-hash") is False
        assert verify_password("secret123", "") is False

    def test_verify_password_non_ascii_hash_returns_false(self):
        """Test that a digest argon2 cannot even encode is still just a mismatch."""
        assert verify_password("secret123", "$argon2id$\u00e9") is False
        assert verify_password("secret123", "\u5bc6\u7801") is False

    def test_verify_password_unicode(self):
        hashed = hash_password("pässwörd-密码")
        assert verify_password("pässwörd-密码", hashed) is True

    def test_dummy_hash_never_matches_user_input(self):
        assert verify_password("secret123", DUMMY_PASSWORD_HASH) is False


class TestNeedsRehash:
    """Tests for needs_rehash function."""

    def test_current_parameters_do_not_need_rehash(self):
        assert needs_rehash(hash_password("secret123")) is False

    def test_weaker_parameters_need_rehash(self):
        weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("secret123")

        assert verify_password("secret123", weak) is True
        assert needs_rehash(weak) is True

    def test_malformed_hash_does_not_need_rehash(self):
        assert needs_rehash("not-a-hash") is False

    def test_non_ascii_hash_does_not_need_rehash(self):
        assert needs_rehash("$argon2id$\u00e9") is False
