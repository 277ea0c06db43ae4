"""
Generic management commands for one entity type.

Reads are gated by ``read_capability`` and mutations by
``write_capability``; both are checked against the session context on every
call. Saving also checks every staged change, so edits made on loaded
entities cannot be committed through a service for another area.
"""

from typing import Any, Dict, Generic, List, Optional, Set, Union

from sqlalchemy import inspect
from sqlalchemy.orm import RelationshipDirection

from ..domain.roles import Capability
from ..models import (
    Category,
    Customer,
    Laptop,
    LaptopSupplier,
    Order,
    OrderDetail,
    Supplier,
    User,
    laptop_categories,
)
from ..repositories.base import T
from ..repositories.changeset import ChangeSet
from ..repositories.filters import FilterSpec
from ..repositories.sqlalchemy_repository import Repository
from ..session_context import SessionContext
from ..unit_of_work import UnitOfWork

# Capability needed to insert, update or delete each entity type
WRITE_CAPABILITIES: Dict[type, Capability] = {
    Laptop: Capability.CATALOG_WRITE,
    LaptopSupplier: Capability.CATALOG_WRITE,
    Order: Capability.ORDERS,
    OrderDetail: Capability.ORDERS,
    Customer: Capability.CUSTOMERS,
    Category: Capability.CATEGORIES,
    Supplier: Capability.SUPPLIERS,
    User: Capability.USERS,
}

# Capability needed to write the rows of each association table
ASSOCIATION_CAPABILITIES: Dict[str, Capability] = {
    laptop_categories.name: Capability.CATALOG_WRITE,
}


def _update_capabilities(obj: Any) -> Set[Capability]:
    state = inspect(obj)
    needed: Set[Capability] = set()
    for attr in state.mapper.column_attrs:
        if state.attrs[attr.key].history.has_changes():
            needed.add(WRITE_CAPABILITIES[type(obj)])
            break
    for rel in state.mapper.relationships:
        # One-to-many changes are written through the child rows
        if rel.direction is RelationshipDirection.ONETOMANY:
            continue
        if not state.attrs[rel.key].history.has_changes():
            continue
        if rel.secondary is not None:
            needed.add(ASSOCIATION_CAPABILITIES[rel.secondary.name])
        else:
            needed.add(WRITE_CAPABILITIES[type(obj)])
    return needed


def required_capabilities(changes: ChangeSet) -> Set[Capability]:
    """
    Capabilities needed to commit ``changes``.

    Inserts and deletes need the write capability of the entity type. An
    update needs it when a column or a many-to-one reference changed, and a
    changed many-to-many collection needs the capability of its association
    table.
    """
    needed = {WRITE_CAPABILITIES[type(obj)] for obj in changes.added + changes.deleted}
    for obj in changes.updated:
        needed |= _update_capabilities(obj)
    return needed


class ManagementService(Generic[T]):
    """List, search, add, edit, delete and save one kind of entity."""

    read_capability: Capability
    write_capability: Capability
    store_name: str

    def __init__(self, uow: UnitOfWork, context: SessionContext):
        """
        Initialize service.

        Args:
            uow: Open unit of work providing the stores
            context: Session context holding the current identity
        """
        self.uow = uow
        self.context = context

    @property
    def store(self) -> Repository[T]:
        return getattr(self.uow, self.store_name)

    def list(self) -> List[T]:
        self.context.require(self.read_capability)
        return self.store.get_all()

    def get(self, entity_id: Any) -> Optional[T]:
        self.context.require(self.read_capability)
        return self.store.get_by_id(entity_id)

    def search(self, spec: FilterSpec) -> List[T]:
        self.context.require(self.read_capability)
        return self.store.find(spec)

    def add(self, entity: T) -> T:
        self.context.require(self.write_capability)
        self.store.add(entity)
        return entity

    def update(self, entity: T) -> T:
        """
        Stage changes to an entity.

        Entities loaded through this unit of work are already tracked, so
        editing their attributes stages the change without calling this.
        ``save`` checks those edits before anything is committed.
        """
        self.context.require(self.write_capability)
        return self.store.update(entity)

    def delete(self, entity_or_id: Union[T, Any]) -> None:
        self.context.require(self.write_capability)
        self.store.delete(entity_or_id)

    def save(self) -> int:
        """
        Commit the unit of work.

        Every staged change is checked, not only those of this service's
        entity type.

        Returns:
            Number of entity rows affected

        Raises:
            PermissionDeniedException: If any staged change needs a
                capability the current identity lacks; nothing is committed
        """
        self.context.require(self.write_capability)
        for capability in sorted(
            required_capabilities(self.uow.pending_changes), key=lambda c: c.value
        ):
            self.context.require(capability)
        return self.uow.commit()


class CustomerService(ManagementService[Customer]):
    read_capability = Capability.CUSTOMERS
    write_capability = Capability.CUSTOMERS
    store_name = "customers"


class CategoryService(ManagementService[Category]):
    read_capability = Capability.CATEGORIES
    write_capability = Capability.CATEGORIES
    store_name = "categories"


class SupplierService(ManagementService[Supplier]):
    read_capability = Capability.SUPPLIERS
    write_capability = Capability.SUPPLIERS
    store_name = "suppliers"
