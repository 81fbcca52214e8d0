# auth/password.py
"""
Password hashing using bcrypt.

Bcrypt handles salt generation itself; the stored hash string carries
salt and cost together.
"""

from __future__ import annotations

import bcrypt
import logging

_logger = logging.getLogger(__name__)

# Work factor (cost)
BCRYPT_ROUNDS = 10

# bcrypt only considers the first 72 bytes and newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: Bcrypt cost factor

    Returns:
        Bcrypt hash string (includes salt)
    """
    if not password:
        raise ValueError("Password cannot be empty")

    password_bytes = _encode(password)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)

    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Malformed hashes count as a mismatch.
    """
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError as e:
        _logger.warning(f"Password verification error: {e}")
        return False
