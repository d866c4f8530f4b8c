"""
Tests for Twoogle Password Hashing
"""

from twoogle.core.crypto import PasswordManager


class TestPasswordManager:
    """Tests for PasswordManager class."""

    def setup_method(self):
        """Set up test fixtures."""
        # Use minimal memory for faster tests
        self.passwords = PasswordManager(
            time_cost=1,
            memory_cost_kb=8192,
            parallelism=1
        )

    def test_hash_password(self):
        """Test password hashing."""
        password = "test_password_123"
        hash1 = self.passwords.hash_password(password)
        hash2 = self.passwords.hash_password(password)

        # Different salts
        assert hash1 != hash2
        assert hash1.startswith("$argon2id$")

        assert self.passwords.verify_password(password, hash1)
        assert self.passwords.verify_password(password, hash2)

    def test_verify_password_wrong(self):
        """Test password verification with wrong password."""
        hash_str = self.passwords.hash_password("correct_password")

        assert self.passwords.verify_password("correct_password", hash_str) is True
        assert self.passwords.verify_password("wrong_password", hash_str) is False

    def test_verify_without_hash(self):
        """Accounts without a stored hash never verify."""
        assert self.passwords.verify_password("", None) is False
        assert self.passwords.verify_password("anything", "") is False

    def test_verify_garbage_hash(self):
        assert self.passwords.verify_password("pw", "not-a-hash") is False

    def test_hash_survives_cost_change(self):
        """Stored hashes keep verifying after the cost settings change."""
        hash_str = self.passwords.hash_password("pw")
        stronger = PasswordManager(time_cost=2, memory_cost_kb=16384, parallelism=1)

        assert stronger.verify_password("pw", hash_str)

    def test_unicode_password(self):
        hash_str = self.passwords.hash_password("pässwörd ✓")

        assert self.passwords.verify_password("pässwörd ✓", hash_str)
        assert not self.passwords.verify_password("passwort", hash_str)
