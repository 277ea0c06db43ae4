"""
User administration commands. Admin only.
"""

from typing import Optional

from ..domain.exceptions import (
    ConstraintViolationException,
    EntityNotFoundException,
    ValidationException,
)
from ..domain.roles import Capability, Role
from ..logging_config import get_logger
from ..models import User
from .management import ManagementService

logger = get_logger(__name__)


class UserAdminService(ManagementService[User]):
    """Create, enable, disable and reset application accounts."""

    read_capability = Capability.USERS
    write_capability = Capability.USERS
    store_name = "users"

    def create_user(
        self,
        username: str,
        password: str,
        role: str,
        full_name: str,
        email: Optional[str] = None,
        is_active: bool = True,
    ) -> User:
        """
        Stage a new account with a hashed password.

        Raises:
            ValidationException: If the role is unknown or the password empty
            ConstraintViolationException: If the username is already taken
        """
        self.context.require(self.write_capability)

        role_name = role.value if isinstance(role, Role) else role
        if role_name not in {r.value for r in Role}:
            raise ValidationException("role", role_name, "unknown role")
        if not password:
            raise ValidationException("password", "", "password must not be empty")
        if self.uow.users.get_by_username(username) is not None:
            raise ConstraintViolationException("User", f"username '{username}' is taken")

        user = User(
            username=username,
            role=role_name,
            full_name=full_name,
            email=email,
            is_active=is_active,
        )
        user.set_password(password)
        self.uow.users.add(user)
        logger.info("Staged new user", username=username, role=role_name)
        return user

    def _user(self, user_id: int) -> User:
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User", user_id)
        return user

    def set_active(self, user_id: int, is_active: bool) -> User:
        """Enable or disable an account."""
        self.context.require(self.write_capability)
        user = self._user(user_id)
        user.is_active = is_active
        return user

    def reset_password(self, user_id: int, new_password: str) -> User:
        """Replace an account's password."""
        self.context.require(self.write_capability)
        if not new_password:
            raise ValidationException("password", "", "password must not be empty")
        user = self._user(user_id)
        user.set_password(new_password)
        return user
