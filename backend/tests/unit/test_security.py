"""Unit tests for password hashing."""

from argon2 import PasswordHasher

from backend.app.core.security import hash_password, needs_rehash, verify_password


class TestPasswordHashing:
    """Test cases for hash_password / verify_password."""

    def test_hash_is_argon2id(self):
        """Test stored hashes are argon2id and salted."""
        first = hash_password("correct-horse")
        second = hash_password("correct-horse")

        assert first.startswith("$argon2id$")
        assert "correct-horse" not in first
        assert first != second

    def test_verify(self):
        """Test the right password matches and a wrong one does not."""
        stored = hash_password("correct-horse")

        assert verify_password("correct-horse", stored) is True
        assert verify_password("wrong-horse", stored) is False

    def test_malformed_hash_never_matches(self):
        """Test corrupted stored hashes are rejected without raising."""
        assert verify_password("correct-horse", "") is False
        assert verify_password("correct-horse", "pbkdf2_sha256$x$y$z") is False
        assert verify_password("correct-horse", "$argon2id$v=19$m=65536,t=3,p=4$garbage") is False

    def test_needs_rehash(self):
        """Test hashes made with weaker parameters are flagged for upgrade."""
        weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("correct-horse")

        assert needs_rehash(weak) is True
        assert needs_rehash(hash_password("correct-horse")) is False
