"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and a configurable work factor.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import bcrypt

from config.settings import config

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt (auto-salted, work factor from config)."""
    salt = bcrypt.gensalt(rounds=rounds or config.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("placeholder-password-for-unknown-users")


def check_credentials(password: str, password_hash: Optional[str]) -> bool:
    """
    Verify a login attempt.

    With no stored hash (unknown email) a fixed dummy hash is checked
    instead, so both failure paths cost one bcrypt comparison.
    """
    if password_hash is None:
        verify_password(password, _dummy_hash())
        return False
    return verify_password(password, password_hash)
