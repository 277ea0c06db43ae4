"""
Order management commands.

``place_order`` prices each line from the laptop's current price unless a
unit price is given, and sets the total to the sum of the lines. Later edits to
the lines do not touch the total; ``recalculate_total`` does that on request.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from ..domain.exceptions import EntityNotFoundException, ValidationException
from ..domain.roles import Capability
from ..logging_config import get_logger
from ..models import Order, OrderDetail
from ..repositories.filters import FilterSpec
from ..repositories.order_repository import OrderRepository
from .management import ManagementService

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """Requested line item: laptop, quantity and optional price override."""

    laptop_id: int
    quantity: int
    unit_price: Optional[Decimal] = None


class OrderService(ManagementService[Order]):
    """Order browsing and editing, with details always loaded."""

    read_capability = Capability.ORDERS
    write_capability = Capability.ORDERS
    store_name = "orders"

    def list(self) -> List[Order]:
        self.context.require(self.read_capability)
        return self.uow.orders.get_all_with_details()

    def get(self, order_id: int) -> Optional[Order]:
        self.context.require(self.read_capability)
        return self.uow.orders.get_by_id_with_details(order_id)

    def search(self, spec: FilterSpec) -> List[Order]:
        self.context.require(self.read_capability)
        return self.uow.orders.find_with(spec)

    def for_customer(self, customer_id: int) -> List[Order]:
        self.context.require(self.read_capability)
        return self.uow.orders.get_by_customer(customer_id)

    def place_order(
        self,
        customer_id: Optional[int],
        lines: Iterable[OrderLine],
        notes: Optional[str] = None,
    ) -> Order:
        """
        Stage a new order with its line items.

        Args:
            customer_id: Ordering customer, or None for a walk-in sale
            lines: Requested line items, at least one
            notes: Free text notes

        Returns:
            The staged order

        Raises:
            EntityNotFoundException: If the customer or a laptop is missing
            ValidationException: If there are no lines or a quantity is not positive
        """
        self.context.require(self.write_capability)

        customer = None
        if customer_id is not None:
            customer = self.uow.customers.get_by_id(customer_id)
            if customer is None:
                raise EntityNotFoundException("Customer", customer_id)

        details = []
        for line in lines:
            if line.quantity <= 0:
                raise ValidationException("quantity", line.quantity, "must be positive")
            laptop = self.uow.laptops.get_by_id(line.laptop_id)
            if laptop is None:
                raise EntityNotFoundException("Laptop", line.laptop_id)
            unit_price = laptop.price if line.unit_price is None else Decimal(line.unit_price)
            details.append(
                OrderDetail(laptop=laptop, quantity=line.quantity, unit_price=unit_price)
            )
        if not details:
            raise ValidationException("lines", [], "an order needs at least one line")

        order = Order(customer=customer, notes=notes, details=details)
        order.total_amount = OrderRepository.calculate_total(order)
        self.uow.orders.add(order)
        logger.info("Staged order", lines=len(details), total=str(order.total_amount))
        return order

    def update_status(self, order_id: int, status: str) -> Order:
        """Set an order's status."""
        self.context.require(self.write_capability)
        order = self.uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundException("Order", order_id)
        order.status = status
        return order

    def recalculate_total(self, order_id: int) -> Decimal:
        """
        Set an order's total to the sum of its line items.

        Returns:
            The new total
        """
        self.context.require(self.write_capability)
        order = self.uow.orders.get_by_id_with_details(order_id)
        if order is None:
            raise EntityNotFoundException("Order", order_id)
        order.total_amount = OrderRepository.calculate_total(order)
        return order.total_amount
