"""
User repository.

Identity lookup and credential checks for application accounts.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..logging_config import get_logger
from ..models import User
from ..rate_limiter import LoginRateLimiter, login_rate_limiter
from ..security import dummy_password_hash, verify_password
from .filters import Filter
from .sqlalchemy_repository import Repository

logger = get_logger(__name__)


class UserRepository(Repository[User]):
    """Repository for application users."""

    def __init__(self, db: Session, rate_limiter: Optional[LoginRateLimiter] = None):
        super().__init__(db, User)
        self.rate_limiter = rate_limiter or login_rate_limiter

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by exact username.

        Args:
            username: Login name

        Returns:
            User if found, None otherwise
        """
        return self.first(Filter("username", "eq", username))

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate user with username and password.

        Unknown usernames, wrong passwords and inactive accounts all give None
        and count as a failure for ``username``. Once the rate limiter blocks
        the username, every attempt gives None until the block expires.

        Args:
            username: Login name
            password: Plain text password

        Returns:
            The active user whose password matches, None otherwise
        """
        if self.rate_limiter.is_blocked(username):
            # Spend the same hashing time as a real check
            verify_password(password, dummy_password_hash())
            logger.info("Authentication failed", username=username, blocked=True)
            return None

        user = self.get_by_username(username)
        if user is None:
            verify_password(password, dummy_password_hash())
            self.rate_limiter.record_failure(username)
            logger.info("Authentication failed", username=username)
            return None

        if not user.check_password(password) or not user.is_active:
            self.rate_limiter.record_failure(username)
            logger.info("Authentication failed", username=username)
            return None

        self.rate_limiter.reset(username)
        logger.info("User authenticated", username=user.username)
        return user
