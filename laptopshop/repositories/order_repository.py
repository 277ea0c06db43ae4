"""
Order repository.

Loads orders together with their customer and line items, each line item
resolved to its laptop, in one logical read.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ..models import Order, OrderDetail
from .filters import Filter
from .sqlalchemy_repository import Repository

# Eager-loading plan for the order aggregate
ORDER_DETAILS = (
    joinedload(Order.customer),
    selectinload(Order.details).joinedload(OrderDetail.laptop),
)


class OrderRepository(Repository[Order]):
    """Repository for the order aggregate rooted at ``Order``."""

    def __init__(self, db: Session):
        super().__init__(db, Order)

    def get_all_with_details(self) -> List[Order]:
        """
        Get every order with customer and line items loaded.

        Returns:
            Orders ordered by id, line items ordered by id
        """
        return self.get_all_with(*ORDER_DETAILS)

    def get_by_id_with_details(self, order_id: int) -> Optional[Order]:
        """
        Get one order with customer and line items loaded.

        Args:
            order_id: Order primary key

        Returns:
            Order if found, None otherwise
        """
        return self.get_by_id_with(order_id, *ORDER_DETAILS)

    def get_by_customer(self, customer_id: int) -> List[Order]:
        """Get a customer's orders with details loaded."""
        return self.find_with(Filter("customer_id", "eq", customer_id), *ORDER_DETAILS)

    @staticmethod
    def calculate_total(order: Order) -> Decimal:
        """
        Sum quantity times unit price over the order's line items.

        The result is not assigned to ``order.total_amount``.
        """
        return sum((detail.line_total for detail in order.details), Decimal("0.00"))
