"""
Login and logout against the user store.
"""

from typing import Optional

from ..logging_config import get_logger
from ..session_context import Identity, SessionContext
from ..unit_of_work import UnitOfWork

logger = get_logger(__name__)


class AuthService:
    """Authenticates credentials and records the identity in the session context."""

    def __init__(self, uow: UnitOfWork, context: SessionContext):
        self.uow = uow
        self.context = context

    def login(self, username: str, password: str) -> Optional[Identity]:
        """
        Log in with username and password.

        The previous identity, if any, is kept when authentication fails.

        Returns:
            The new identity, or None when the credentials are rejected
        """
        user = self.uow.users.authenticate(username, password)
        if user is None:
            return None
        self.context.login(user)
        return self.context.current_user

    def logout(self) -> None:
        self.context.logout()
