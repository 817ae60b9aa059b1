"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  The cost is embedded in every
digest, so raising ``rounds`` later leaves existing hashes verifiable.
"""

from __future__ import annotations

import bcrypt

HASH_ALGORITHM = "bcrypt"
DEFAULT_ROUNDS = 12

# bcrypt only consumes the first 72 bytes of its input.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted, work factor ``rounds``)."""
    if not password:
        raise ValueError("Cannot hash an empty password")
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except (ValueError, TypeError):
        return False
