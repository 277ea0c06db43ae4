"""
Session context: the authenticated identity and its capabilities.

A ``SessionContext`` is created once per logical application session and
passed explicitly to the commands that need it. It holds at most one identity
at a time; logging in replaces whatever identity was held before.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .domain.exceptions import PermissionDeniedException
from .domain.roles import READ_ONLY_CATALOG_ROLES, Capability, Role, roles_for
from .logging_config import get_logger
from .models import User

logger = get_logger(__name__)

RoleLike = Union[Role, str]


@dataclass(frozen=True)
class Identity:
    """
    Snapshot of the logged-in user.

    Detached from any database session, so it stays valid after the unit of
    work that loaded the user is closed.
    """

    user_id: Optional[int]
    username: str
    role: str
    full_name: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            user_id=user.id,
            username=user.username,
            role=user.role,
            full_name=user.full_name,
        )


def _role_name(role: RoleLike) -> str:
    return role.value if isinstance(role, Role) else role


class SessionContext:
    """
    Holder of the current identity and the role checks made against it.

    Every check returns False when nobody is logged in.
    """

    def __init__(self) -> None:
        self._identity: Optional[Identity] = None

    @property
    def current_user(self) -> Optional[Identity]:
        """The logged-in identity, or None."""
        return self._identity

    def login(self, user: Union[User, Identity]) -> None:
        """
        Make ``user`` the current identity, replacing any previous one.

        Args:
            user: User row or identity snapshot
        """
        identity = user if isinstance(user, Identity) else Identity.from_user(user)
        if self._identity is not None:
            logger.info("Replacing session", username=self._identity.username)
        self._identity = identity
        logger.info("Logged in", username=identity.username, role=identity.role)

    def logout(self) -> None:
        """Clear the current identity."""
        if self._identity is not None:
            logger.info("Logged out", username=self._identity.username)
        self._identity = None

    def is_authenticated(self) -> bool:
        return self._identity is not None

    def has_role(self, role: RoleLike) -> bool:
        """True iff someone is logged in and their role equals ``role`` exactly."""
        if self._identity is None:
            return False
        return self._identity.role == _role_name(role)

    def has_any_role(self, *roles: RoleLike) -> bool:
        """True iff someone is logged in and their role equals any of ``roles``."""
        if self._identity is None:
            return False
        return any(self._identity.role == _role_name(role) for role in roles)

    def can(self, capability: Capability) -> bool:
        """Whether the current identity holds ``capability``."""
        if capability == Capability.CATALOG_WRITE:
            return self.can_modify_catalog()
        return self.has_any_role(*roles_for(capability))

    def can_modify_catalog(self) -> bool:
        """Catalog access without the read-only restriction."""
        return self.can(Capability.CATALOG_READ) and not self.has_any_role(
            *READ_ONLY_CATALOG_ROLES
        )

    def require(self, capability: Capability) -> None:
        """
        Ensure the current identity holds ``capability``.

        Raises:
            PermissionDeniedException: If it does not
        """
        if self.can(capability):
            return
        role = self._identity.role if self._identity else None
        logger.warning("Permission denied", capability=capability.value, role=role)
        raise PermissionDeniedException(capability.value, role)

    # Named checks for each area

    def can_access_catalog(self) -> bool:
        return self.can(Capability.CATALOG_READ)

    def can_access_orders(self) -> bool:
        return self.can(Capability.ORDERS)

    def can_access_customers(self) -> bool:
        return self.can(Capability.CUSTOMERS)

    def can_access_categories(self) -> bool:
        return self.can(Capability.CATEGORIES)

    def can_access_suppliers(self) -> bool:
        return self.can(Capability.SUPPLIERS)

    def can_access_users(self) -> bool:
        return self.can(Capability.USERS)
