"""
SQLAlchemy implementation of the generic repository.

One repository instance serves one mapped class over one session. All
repositories sharing a session share its staged change-set.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Type, Union

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.interfaces import LoaderOption

from ..domain.exceptions import ConnectivityException, EntityNotFoundException
from ..logging_config import get_logger
from .base import IRepository, T
from .changeset import ChangeSet, commit_session
from .filters import FilterSpec

logger = get_logger(__name__)


class Repository(IRepository[T]):
    """Generic repository for one mapped entity class."""

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
            model: Mapped class served by this repository
        """
        self.db = db
        self.model = model

    @contextmanager
    def _reading(self, operation: str) -> Iterator[None]:
        try:
            yield
        except OperationalError as e:
            logger.error(
                "Database read failed",
                entity=self.model.__name__,
                operation=operation,
                error=str(e.orig),
            )
            raise ConnectivityException(f"{self.model.__name__}.{operation}", str(e.orig)) from e

    def _ordered(self, stmt):
        return stmt.order_by(*inspect(self.model).primary_key)

    def get_all(self) -> List[T]:
        return self.get_all_with()

    def get_all_with(self, *options: LoaderOption) -> List[T]:
        """
        Get every entity, applying loader options.

        Args:
            *options: SQLAlchemy loader options such as ``selectinload``

        Returns:
            Entities ordered by primary key
        """
        stmt = self._ordered(select(self.model).options(*options))
        with self._reading("get_all"):
            return list(self.db.scalars(stmt).unique().all())

    def get_by_id(self, entity_id: Any) -> Optional[T]:
        with self._reading("get_by_id"):
            return self.db.get(self.model, entity_id)

    def get_by_id_with(self, entity_id: Any, *options: LoaderOption) -> Optional[T]:
        """
        Look up an entity by primary key, applying loader options.

        Unlike ``get_by_id`` this always queries the database, so eager
        loaders also fill unloaded relationships of an instance the session
        already tracks. Attributes modified in memory are left untouched.

        Args:
            entity_id: Primary key value, a tuple for composite keys
            *options: SQLAlchemy loader options

        Returns:
            Entity if found, None otherwise
        """
        keys = entity_id if isinstance(entity_id, tuple) else (entity_id,)
        columns = inspect(self.model).primary_key
        stmt = select(self.model).options(*options)
        for column, value in zip(columns, keys):
            stmt = stmt.where(column == value)
        with self._reading("get_by_id"):
            return self.db.scalars(stmt).unique().first()

    def find(self, spec: FilterSpec) -> List[T]:
        return self.find_with(spec)

    def find_with(self, spec: FilterSpec, *options: LoaderOption) -> List[T]:
        """
        Get entities matching ``spec``, applying loader options.

        Args:
            spec: Filter specification
            *options: SQLAlchemy loader options

        Returns:
            Matching entities ordered by primary key
        """
        stmt = self._ordered(
            select(self.model).where(spec.to_clause(self.model)).options(*options)
        )
        with self._reading("find"):
            return list(self.db.scalars(stmt).unique().all())

    def first(self, spec: FilterSpec) -> Optional[T]:
        """Get the first entity matching ``spec``, or None."""
        stmt = self._ordered(select(self.model).where(spec.to_clause(self.model)))
        with self._reading("first"):
            return self.db.scalars(stmt.limit(1)).first()

    def count(self, spec: Optional[FilterSpec] = None) -> int:
        """Count persisted entities, optionally restricted by ``spec``."""
        stmt = select(func.count()).select_from(self.model)
        if spec is not None:
            stmt = stmt.where(spec.to_clause(self.model))
        with self._reading("count"):
            return self.db.scalar(stmt)

    def exists(self, spec: FilterSpec) -> bool:
        """Whether any persisted entity matches ``spec``."""
        return self.count(spec) > 0

    def add(self, entity: T) -> None:
        self.db.add(entity)
        logger.debug("Staged insert", entity=repr(entity))

    def update(self, entity: T) -> T:
        if entity in self.db:
            return entity

        # Detached or transient copy: copy its state onto the tracked row
        identity = self._identity_of(entity)
        if identity is None or self.get_by_id(identity) is None:
            raise EntityNotFoundException(self.model.__name__, identity)
        merged = self.db.merge(entity)
        logger.debug("Staged update", entity=repr(merged))
        return merged

    def delete(self, entity_or_id: Union[T, Any]) -> None:
        if isinstance(entity_or_id, self.model):
            entity = entity_or_id
            state = inspect(entity)
            if state.pending:
                # Never persisted: just unstage the insert
                self.db.expunge(entity)
                logger.debug("Unstaged insert", entity=repr(entity))
                return
            if entity not in self.db:
                identity = self._identity_of(entity)
                entity = self.get_by_id(identity) if identity is not None else None
        else:
            entity = self.get_by_id(entity_or_id)

        if entity is None:
            logger.debug(
                "Nothing to delete", entity=self.model.__name__, key=repr(entity_or_id)
            )
            return

        self.db.delete(entity)
        logger.debug("Staged delete", entity=repr(entity))

    def _identity_of(self, entity: T) -> Optional[tuple]:
        """Primary key tuple of ``entity``, or None if any part is unset."""
        identity = tuple(inspect(self.model).primary_key_from_instance(entity))
        if any(value is None for value in identity):
            return None
        return identity

    @property
    def pending_changes(self) -> ChangeSet:
        """Changes staged on the session and not yet committed."""
        return ChangeSet.from_session(self.db)

    def commit(self) -> int:
        return commit_session(self.db)

    def rollback(self) -> None:
        """Discard every staged change."""
        self.db.rollback()
        logger.debug("Discarded staged changes")
