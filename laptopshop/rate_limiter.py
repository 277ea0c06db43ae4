"""
Failed-login limiting.

Counts failed credential checks per username in a sliding window. Once a
username reaches the limit it is blocked for a fixed duration, during which
every check for it fails, even with the right password.

Note: state is held in process memory, so each process keeps its own count.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict

from .config import settings
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitConfig:
    """Configuration for the failed-login rule."""

    max_failures: int  # Failures allowed inside one window
    window_seconds: int  # Sliding window length in seconds
    block_duration_seconds: int  # How long to block once the limit is reached


@dataclass
class AttemptState:
    """Failure tracking for a single username."""

    failures: list = field(default_factory=list)  # Timestamps of failures
    blocked_until: float = 0.0  # Unix timestamp when block expires


class LoginRateLimiter:
    """
    In-memory failed-login limiter with a sliding window.

    Thread-safe for concurrent access.

    Attributes:
        config: Rate limit configuration
        _attempts: Dictionary mapping usernames to their state
        _lock: Thread lock for concurrent access
    """

    def __init__(self, config: RateLimitConfig) -> None:
        """
        Initialize limiter with configuration.

        Args:
            config: Rate limit configuration
        """
        self.config = config
        self._attempts: Dict[str, AttemptState] = defaultdict(AttemptState)
        self._lock = Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = 60.0

    def _cleanup_old_entries(self, now: float) -> None:
        """Remove expired entries to prevent memory leaks."""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        cutoff = now - self.config.window_seconds - self.config.block_duration_seconds

        expired = [
            username
            for username, state in self._attempts.items()
            if (not state.failures or state.failures[-1] < cutoff)
            and state.blocked_until < now
        ]

        for username in expired:
            del self._attempts[username]

        if expired:
            logger.debug("Cleaned up expired login attempt entries", count=len(expired))

    def is_blocked(self, username: str) -> bool:
        """
        Check whether ``username`` is currently blocked.

        Args:
            username: Login name

        Returns:
            True while a block is in force
        """
        now = time.time()

        with self._lock:
            self._cleanup_old_entries(now)
            state = self._attempts.get(username)
            if state is None:
                return False
            return state.blocked_until > now

    def record_failure(self, username: str) -> None:
        """
        Record one failed check and block the username when the limit is reached.

        Args:
            username: Login name
        """
        now = time.time()

        with self._lock:
            state = self._attempts[username]

            window_start = now - self.config.window_seconds
            state.failures = [ts for ts in state.failures if ts > window_start]
            state.failures.append(now)

            if len(state.failures) >= self.config.max_failures:
                state.blocked_until = now + self.config.block_duration_seconds
                state.failures = []
                logger.warning(
                    "Login blocked after repeated failures",
                    username=username,
                    max_failures=self.config.max_failures,
                    block_seconds=self.config.block_duration_seconds,
                )

    def get_remaining(self, username: str) -> int:
        """
        Get remaining failures allowed for ``username`` in the current window.

        Args:
            username: Login name

        Returns:
            Number of further failures allowed before a block
        """
        now = time.time()

        with self._lock:
            state = self._attempts.get(username)
            if not state:
                return self.config.max_failures

            if state.blocked_until > now:
                return 0

            window_start = now - self.config.window_seconds
            active = len([ts for ts in state.failures if ts > window_start])
            return max(0, self.config.max_failures - active)

    def reset(self, username: str) -> None:
        """Forget the failures recorded for ``username``."""
        with self._lock:
            self._attempts.pop(username, None)

    def clear(self) -> None:
        """Forget all recorded failures and blocks."""
        with self._lock:
            self._attempts.clear()


# Shared limiter for credential checks
login_rate_limiter = LoginRateLimiter(
    RateLimitConfig(
        max_failures=settings.LOGIN_MAX_FAILED_ATTEMPTS,
        window_seconds=settings.LOGIN_FAILURE_WINDOW_SECONDS,
        block_duration_seconds=settings.LOGIN_BLOCK_SECONDS,
    )
)
