"""Password hashing and verification with bcrypt."""

import bcrypt

from backend.core import config


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt at the configured work factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Return True iff ``password`` matches ``password_hash``.

    A malformed or empty hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError, AttributeError):
        return False
