"""
Catalog management commands.

Every role with catalog access can browse; only roles outside the read-only
set may change laptops, their categories, supplier links and stock.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from ..domain.exceptions import (
    ConstraintViolationException,
    EntityNotFoundException,
    ValidationException,
)
from ..domain.roles import Capability
from ..logging_config import get_logger
from ..models import Laptop, LaptopSupplier
from ..repositories.filters import Filter, FilterSpec
from .management import ManagementService

logger = get_logger(__name__)


class CatalogService(ManagementService[Laptop]):
    """Catalog browsing and editing, with details always loaded."""

    read_capability = Capability.CATALOG_READ
    write_capability = Capability.CATALOG_WRITE
    store_name = "laptops"

    @property
    def is_read_only(self) -> bool:
        """Whether the current identity may only browse the catalog."""
        return not self.context.can(self.write_capability)

    def list(self) -> List[Laptop]:
        self.context.require(self.read_capability)
        return self.uow.laptops.get_all_with_details()

    def get(self, laptop_id: int) -> Optional[Laptop]:
        self.context.require(self.read_capability)
        return self.uow.laptops.get_by_id_with_details(laptop_id)

    def search(self, spec: FilterSpec) -> List[Laptop]:
        self.context.require(self.read_capability)
        return self.uow.laptops.find_with_details(spec)

    def by_category(self, category_id: int) -> List[Laptop]:
        self.context.require(self.read_capability)
        return self.uow.laptops.get_by_category(category_id)

    def _laptop(self, laptop_id: int) -> Laptop:
        laptop = self.uow.laptops.get_by_id_with_details(laptop_id)
        if laptop is None:
            raise EntityNotFoundException("Laptop", laptop_id)
        return laptop

    def assign_categories(self, laptop_id: int, category_ids: Iterable[int]) -> Laptop:
        """
        Replace the categories a laptop is filed under.

        Args:
            laptop_id: Laptop primary key
            category_ids: Primary keys of the new category set

        Returns:
            The laptop with its staged category set

        Raises:
            EntityNotFoundException: If the laptop or any category is missing
        """
        self.context.require(self.write_capability)
        laptop = self._laptop(laptop_id)

        wanted = set(category_ids)
        categories = self.uow.categories.find(Filter("id", "in", wanted)) if wanted else []
        missing = wanted - {category.id for category in categories}
        if missing:
            raise EntityNotFoundException("Category", sorted(missing))

        laptop.categories = categories
        return laptop

    def link_supplier(
        self,
        laptop_id: int,
        supplier_id: int,
        supply_price: Optional[Decimal] = None,
        supply_date: Optional[datetime] = None,
    ) -> LaptopSupplier:
        """
        Record that a supplier supplies a laptop.

        A laptop has at most one supply record per supplier.

        Args:
            laptop_id: Laptop primary key
            supplier_id: Supplier primary key
            supply_price: Purchase price from the supplier
            supply_date: Supply date, the database uses now when omitted

        Returns:
            The staged supply record

        Raises:
            EntityNotFoundException: If the laptop or supplier is missing
            ConstraintViolationException: If the pair is already linked
        """
        self.context.require(self.write_capability)
        laptop = self._laptop(laptop_id)
        supplier = self.uow.suppliers.get_by_id(supplier_id)
        if supplier is None:
            raise EntityNotFoundException("Supplier", supplier_id)

        if any(link.supplier_id == supplier_id for link in laptop.supplier_links):
            raise ConstraintViolationException(
                "LaptopSupplier",
                f"laptop {laptop_id} is already supplied by supplier {supplier_id}",
            )
        if supply_price is not None and Decimal(supply_price) < 0:
            raise ValidationException("supply_price", supply_price, "must not be negative")

        link = LaptopSupplier(laptop=laptop, supplier=supplier, supply_price=supply_price)
        if supply_date is not None:
            link.supply_date = supply_date
        self.uow.laptop_suppliers.add(link)
        logger.info("Staged supply link", laptop_id=laptop_id, supplier_id=supplier_id)
        return link

    def unlink_supplier(self, laptop_id: int, supplier_id: int) -> None:
        """Remove a supply record; a missing pair is a no-op."""
        self.context.require(self.write_capability)
        link = self.uow.laptop_suppliers.get_by_id((laptop_id, supplier_id))
        if link is None:
            return
        self.uow.laptop_suppliers.delete(link)

    def adjust_stock(self, laptop_id: int, delta: int) -> int:
        """
        Change a laptop's stock by ``delta``.

        Returns:
            The new stock level

        Raises:
            EntityNotFoundException: If the laptop is missing
            ValidationException: If stock would go below zero
        """
        self.context.require(self.write_capability)
        laptop = self.uow.laptops.get_by_id(laptop_id)
        if laptop is None:
            raise EntityNotFoundException("Laptop", laptop_id)

        new_stock = (laptop.stock or 0) + delta
        if new_stock < 0:
            raise ValidationException("stock", new_stock, "stock cannot go below zero")
        laptop.stock = new_stock
        return new_stock
