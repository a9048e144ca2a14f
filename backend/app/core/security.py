"""Password hashing helpers."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

PWD = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password for storage (argon2id encoded string)."""
    return PWD.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash; malformed hashes never match."""
    try:
        return bool(PWD.verify(password_hash, password))
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the stored hash was made with outdated parameters."""
    return PWD.check_needs_rehash(password_hash)
