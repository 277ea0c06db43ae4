"""
Catalog repository.

Loads laptops together with their categories and supplier links in one
logical read.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models import Category, Laptop, LaptopSupplier
from .filters import FilterSpec
from .sqlalchemy_repository import Repository

# Eager-loading plan for the catalog aggregate
LAPTOP_DETAILS = (
    selectinload(Laptop.categories),
    selectinload(Laptop.supplier_links).joinedload(LaptopSupplier.supplier),
)


class LaptopRepository(Repository[Laptop]):
    """Repository for the catalog aggregate rooted at ``Laptop``."""

    def __init__(self, db: Session):
        super().__init__(db, Laptop)

    def get_all_with_details(self) -> List[Laptop]:
        """
        Get every laptop with categories and supplier links loaded.

        Returns:
            Laptops ordered by id, each supplier link carrying its supplier
        """
        return self.get_all_with(*LAPTOP_DETAILS)

    def get_by_id_with_details(self, laptop_id: int) -> Optional[Laptop]:
        """
        Get one laptop with categories and supplier links loaded.

        Args:
            laptop_id: Laptop primary key

        Returns:
            Laptop if found, None otherwise
        """
        return self.get_by_id_with(laptop_id, *LAPTOP_DETAILS)

    def find_with_details(self, spec: FilterSpec) -> List[Laptop]:
        """Get laptops matching ``spec`` with their details loaded."""
        return self.find_with(spec, *LAPTOP_DETAILS)

    def get_by_category(self, category_id: int) -> List[Laptop]:
        """Get laptops filed under a category, with details loaded."""
        stmt = (
            select(Laptop)
            .join(Laptop.categories)
            .where(Category.id == category_id)
            .options(*LAPTOP_DETAILS)
            .order_by(Laptop.id)
        )
        with self._reading("get_by_category"):
            return list(self.db.scalars(stmt).unique().all())
