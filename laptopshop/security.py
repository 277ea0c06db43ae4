"""
Security utilities for user credentials.

Provides bcrypt password hashing and verification.
"""

from functools import lru_cache
from typing import Optional

import bcrypt

from .config import settings
from .logging_config import get_logger

logger = get_logger(__name__)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor, defaults to ``PASSWORD_HASH_ROUNDS``

    Returns:
        Hashed password string
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.PASSWORD_HASH_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        password: Plain text password to verify
        hashed_password: Stored hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error("Password verification failed", error=str(e))
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash checked for unknown usernames so lookups and mismatches take equal time."""
    return hash_password("laptopshop-unknown-user")
