"""
Unit of work over one database session.

Opening a unit of work opens one session and one store per entity, all
sharing the same staged change-set. ``commit`` persists the whole change-set
atomically; leaving the block discards anything still staged.

Example:
    >>> with UnitOfWork() as uow:
    ...     uow.categories.add(Category(name="Gaming"))
    ...     uow.commit()
"""

from typing import Any, Callable, Optional, Type

from sqlalchemy.orm import Session

from .database import get_session_factory
from .logging_config import get_logger
from .models import Category, Customer, LaptopSupplier, OrderDetail, Supplier
from .repositories.changeset import ChangeSet, commit_session
from .repositories.laptop_repository import LaptopRepository
from .repositories.order_repository import OrderRepository
from .repositories.sqlalchemy_repository import Repository
from .repositories.user_repository import UserRepository

logger = get_logger(__name__)


class UnitOfWork:
    """
    Transaction handle: open, stage operations, then commit or roll back.

    Not thread-safe; each logical edit session owns its own instance.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        """
        Initialize unit of work.

        Args:
            session_factory: Callable returning a new session, defaults to the
                application session factory
        """
        self.session_factory = session_factory or get_session_factory()
        self.session: Optional[Session] = None

    def __enter__(self) -> "UnitOfWork":
        self.session = self.session_factory()
        self.categories = Repository(self.session, Category)
        self.customers = Repository(self.session, Customer)
        self.suppliers = Repository(self.session, Supplier)
        self.laptop_suppliers = Repository(self.session, LaptopSupplier)
        self.order_details = Repository(self.session, OrderDetail)
        self.laptops = LaptopRepository(self.session)
        self.orders = OrderRepository(self.session)
        self.users = UserRepository(self.session)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self.session is None:
            return
        changes = ChangeSet.from_session(self.session)
        if not changes.is_empty():
            logger.info("Discarding uncommitted changes", changes=changes.count)
        # Closing drops staged changes but keeps loaded objects readable
        self.session.close()
        self.session = None

    def _require_open(self) -> Session:
        if self.session is None:
            raise RuntimeError("Unit of work is not open; use it as a context manager")
        return self.session

    def repository(self, model: Type[Any]) -> Repository:
        """Generic store for any mapped class, bound to this unit of work."""
        return Repository(self._require_open(), model)

    @property
    def pending_changes(self) -> ChangeSet:
        """Changes staged and not yet committed."""
        return ChangeSet.from_session(self._require_open())

    def commit(self) -> int:
        """
        Persist every staged change atomically.

        Returns:
            Number of entity rows affected

        Raises:
            ConstraintViolationException: If the database rejects the change-set;
                the change-set stays staged
            ConnectivityException: If the database cannot be reached
        """
        return commit_session(self._require_open())

    def rollback(self) -> None:
        """Discard every staged change."""
        session = self._require_open()
        if session.new or session.deleted or session.dirty:
            logger.info("Discarding uncommitted changes")
        session.rollback()
