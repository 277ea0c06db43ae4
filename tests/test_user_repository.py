"""
Tests for the user repository and credential checks.
"""

import time
from unittest.mock import patch

import pytest

from laptopshop.domain.exceptions import ConstraintViolationException
from laptopshop.domain.roles import Role
from laptopshop.models import User
from laptopshop.rate_limiter import LoginRateLimiter, RateLimitConfig
from laptopshop.repositories.user_repository import UserRepository


@pytest.fixture
def users(new_uow, make_user):
    """Committed active admin alice and inactive sales clerk bob."""
    with new_uow() as uow:
        uow.users.add(make_user("alice", "p@ss", Role.ADMIN.value))
        uow.users.add(make_user("bob", "secret", Role.SALES.value, is_active=False))
        uow.commit()


class TestGetByUsername:
    """Test lookup by login name."""

    def test_existing_user(self, uow, users):
        """Test exact match."""
        user = uow.users.get_by_username("alice")
        assert user is not None
        assert user.role == "Admin"
        assert user.full_name == "Alice"

    def test_unknown_user(self, uow, users):
        """Test that a miss is None."""
        assert uow.users.get_by_username("carol") is None

    def test_match_is_exact(self, uow, users):
        """Test that case and surrounding text matter."""
        assert uow.users.get_by_username("ALICE") is None
        assert uow.users.get_by_username("ali") is None

    def test_unique_username(self, new_uow, users, make_user):
        """Test that a second account with the same name is rejected."""
        with new_uow() as uow:
            uow.users.add(make_user("alice", "other"))
            with pytest.raises(ConstraintViolationException):
                uow.commit()


class TestAuthenticate:
    """Test credential verification."""

    def test_correct_credentials(self, uow, users):
        """Test that matching credentials return the user."""
        user = uow.users.authenticate("alice", "p@ss")
        assert user is not None
        assert user.username == "alice"

    def test_wrong_password(self, uow, users):
        """Test that a wrong password is an absent result."""
        assert uow.users.authenticate("alice", "wrong") is None

    def test_unknown_user(self, uow, users):
        """Test that an unknown username is an absent result."""
        assert uow.users.authenticate("nobody", "p@ss") is None

    def test_inactive_user(self, uow, users):
        """Test that a disabled account cannot authenticate."""
        assert uow.users.authenticate("bob", "secret") is None

    def test_password_stored_hashed(self, uow, users):
        """Test that the raw password is not stored."""
        user = uow.users.get_by_username("alice")
        assert user.password_hash != "p@ss"
        assert user.password_hash.startswith("$2")
        assert user.check_password("p@ss")
        assert not user.check_password("P@SS")

    def test_default_active(self, new_uow):
        """Test that accounts are active unless disabled."""
        with new_uow() as uow:
            user = User(username="carol", role="Manager", full_name="Carol")
            user.set_password("pw")
            uow.users.add(user)
            uow.commit()
            assert uow.users.get_by_username("carol").is_active is True


class TestAuthenticateRateLimit:
    """Test that repeated failures block a username."""

    @pytest.fixture
    def store(self, uow, users):
        """User store with a limiter of three failures and a two minute block."""
        limiter = LoginRateLimiter(
            RateLimitConfig(max_failures=3, window_seconds=60, block_duration_seconds=120)
        )
        return UserRepository(uow.session, rate_limiter=limiter)

    def test_correct_password_refused_while_blocked(self, store):
        """Test that a blocked username fails even with the right password."""
        for _ in range(3):
            assert store.authenticate("alice", "wrong") is None
        assert store.rate_limiter.is_blocked("alice")
        assert store.authenticate("alice", "p@ss") is None

    def test_block_lifts_after_duration(self, store):
        """Test that the right password works again once the block expires."""
        now = time.time()
        with patch("time.time", return_value=now):
            for _ in range(3):
                store.authenticate("alice", "wrong")
            assert store.authenticate("alice", "p@ss") is None

        with patch("time.time", return_value=now + 121):
            user = store.authenticate("alice", "p@ss")
        assert user is not None
        assert user.username == "alice"

    def test_unknown_username_counts(self, store):
        """Test that guesses against an unknown name are limited too."""
        for _ in range(3):
            store.authenticate("nobody", "guess")
        assert store.rate_limiter.is_blocked("nobody")

    def test_success_resets_count(self, store):
        """Test that a successful login clears earlier failures."""
        store.authenticate("alice", "wrong")
        store.authenticate("alice", "wrong")
        assert store.authenticate("alice", "p@ss") is not None
        store.authenticate("alice", "wrong")
        store.authenticate("alice", "wrong")
        assert not store.rate_limiter.is_blocked("alice")

    def test_other_users_unaffected(self, store):
        """Test that one blocked name does not block another."""
        for _ in range(3):
            store.authenticate("alice", "wrong")
        assert store.rate_limiter.is_blocked("bob") is False

    def test_shared_limiter_blocks_by_default(self, uow, users):
        """Test that the unit of work's user store is limited out of the box."""
        for _ in range(50):
            assert uow.users.authenticate("alice", "wrong") is None
        assert uow.users.authenticate("alice", "p@ss") is None
