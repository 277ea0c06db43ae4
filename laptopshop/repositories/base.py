"""
Repository interface (Abstract Base Class).

Defines the contract for entity persistence and retrieval independent of the
underlying storage mechanism.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar, Union

from .filters import FilterSpec

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """
    Abstract repository interface for one entity type.

    Mutations are staged and only reach the database on ``commit``.
    """

    @abstractmethod
    def get_all(self) -> List[T]:
        """
        Get every persisted entity.

        Returns:
            Fully materialized list of entities
        """
        pass

    @abstractmethod
    def get_by_id(self, entity_id: Any) -> Optional[T]:
        """
        Look up an entity by primary key.

        Args:
            entity_id: Primary key value, a tuple for composite keys

        Returns:
            Entity if found, None otherwise
        """
        pass

    @abstractmethod
    def find(self, spec: FilterSpec) -> List[T]:
        """
        Get entities matching a filter specification.

        Args:
            spec: Filter evaluated by the database

        Returns:
            List of matching entities
        """
        pass

    @abstractmethod
    def add(self, entity: T) -> None:
        """Stage an insert."""
        pass

    @abstractmethod
    def update(self, entity: T) -> T:
        """
        Stage an update of all mutable attributes.

        Args:
            entity: Entity carrying the primary key of the row to update

        Returns:
            The instance tracked by the store
        """
        pass

    @abstractmethod
    def delete(self, entity_or_id: Union[T, Any]) -> None:
        """
        Stage a removal.

        Deleting by id resolves the entity first; a missing id is a no-op.
        """
        pass

    @abstractmethod
    def commit(self) -> int:
        """
        Persist all staged changes atomically.

        Returns:
            Number of entity rows affected
        """
        pass
