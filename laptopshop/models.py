"""
Database models for the laptop shop.

This module defines SQLAlchemy ORM models for the catalog (laptops, categories,
suppliers), customers and their orders, and application users.

Defaults, uniqueness and non-negative amounts are enforced by the database
schema, so breaches surface when a unit of work commits.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    true,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from .security import hash_password, verify_password

Base: Any = declarative_base()

# Fixed-point money columns: 18 digits, 2 fractional
Money = Numeric(18, 2, asdecimal=True)


# Pure many-to-many link between laptops and categories
laptop_categories = Table(
    "laptop_categories",
    Base.metadata,
    Column(
        "laptop_id",
        Integer,
        ForeignKey("laptops.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Category(Base):
    """
    Catalog category.

    Attributes:
        id: Primary key identifier
        name: Unique category name (max 50 characters)
        description: Free text description
        laptops: Laptops filed under this category
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(255), nullable=True)

    laptops = relationship(
        "Laptop", secondary=laptop_categories, back_populates="categories"
    )

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"


class Customer(Base):
    """
    Customer placing orders.

    Attributes:
        id: Primary key identifier
        name: Customer name
        email: Contact email
        phone: Contact phone number
        address: Postal address
        created_date: Timestamp of record creation (set by the database)
        orders: Orders placed by this customer
    """

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    created_date = Column(DateTime, server_default=func.now())

    # Orders outlive their customer: deleting a customer nulls customer_id
    orders = relationship("Order", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r}>"


class Laptop(Base):
    """
    Catalog item and catalog aggregate root.

    Attributes:
        id: Primary key identifier
        brand: Manufacturer brand
        model: Model name
        processor: CPU description
        ram: Memory description
        storage: Storage description
        gpu: Graphics description
        price: Selling price, fixed-point with 2 decimals
        stock: Units in stock (database default 0)
        description: Free text description
        categories: Categories this laptop is filed under
        supplier_links: Supply relationships, each carrying its supplier
        order_details: Order lines referencing this laptop
    """

    __tablename__ = "laptops"

    id = Column(Integer, primary_key=True, index=True)
    brand = Column(String(50), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    processor = Column(String(100), nullable=True)
    ram = Column(String(50), nullable=True)
    storage = Column(String(50), nullable=True)
    gpu = Column(String(100), nullable=True)
    price = Column(Money, nullable=False)
    stock = Column(Integer, nullable=False, server_default="0")
    description = Column(String(500), nullable=True)

    categories = relationship(
        "Category",
        secondary=laptop_categories,
        back_populates="laptops",
        order_by="Category.id",
    )
    supplier_links = relationship(
        "LaptopSupplier",
        back_populates="laptop",
        cascade="all",
        order_by="LaptopSupplier.supplier_id",
    )
    # Order lines outlive the laptop: deleting a laptop nulls laptop_id
    order_details = relationship("OrderDetail", back_populates="laptop")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_laptops_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_laptops_stock_non_negative"),
    )

    @property
    def display_name(self) -> str:
        """Brand and model, as shown in listings."""
        return f"{self.brand} {self.model}"

    def __repr__(self) -> str:
        return f"<Laptop id={self.id} {self.brand} {self.model}>"


class Supplier(Base):
    """
    Supplier of catalog items.

    Attributes:
        id: Primary key identifier
        name: Supplier company name
        contact_person: Name of the contact at the supplier
        email: Contact email
        phone: Contact phone number
        address: Postal address
        laptop_links: Supply relationships to laptops
    """

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    contact_person = Column(String(100), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)

    laptop_links = relationship(
        "LaptopSupplier", back_populates="supplier", cascade="all"
    )

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"


class LaptopSupplier(Base):
    """
    Supply relationship between a laptop and a supplier.

    Keyed by the (laptop_id, supplier_id) pair, so a laptop has at most one
    supply record per supplier.

    Attributes:
        laptop_id: Laptop primary key (part of composite key)
        supplier_id: Supplier primary key (part of composite key)
        supply_date: When the supply relationship was recorded (database default now)
        supply_price: Purchase price from this supplier
    """

    __tablename__ = "laptop_suppliers"

    laptop_id = Column(
        Integer, ForeignKey("laptops.id", ondelete="CASCADE"), primary_key=True
    )
    supplier_id = Column(
        Integer, ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True
    )
    supply_date = Column(DateTime, server_default=func.now())
    supply_price = Column(Money, nullable=True)

    laptop = relationship("Laptop", back_populates="supplier_links")
    supplier = relationship("Supplier", back_populates="laptop_links")

    __table_args__ = (
        CheckConstraint(
            "supply_price IS NULL OR supply_price >= 0",
            name="ck_laptop_suppliers_price_non_negative",
        ),
    )

    def __repr__(self) -> str:
        return f"<LaptopSupplier laptop_id={self.laptop_id} supplier_id={self.supplier_id}>"


class Order(Base):
    """
    Customer order and order aggregate root.

    ``total_amount`` is maintained by the caller; it is not derived from the
    line items.

    Attributes:
        id: Primary key identifier
        customer_id: Ordering customer, NULL once the customer is removed
        order_date: When the order was placed (database default now)
        total_amount: Order total, fixed-point with 2 decimals
        status: Processing status (database default "Pending")
        notes: Free text notes
        customer: Ordering customer, if still present
        details: Line items ordered by id
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    order_date = Column(DateTime, server_default=func.now())
    total_amount = Column(Money, nullable=False)
    status = Column(String(20), nullable=False, server_default="Pending")
    notes = Column(String(500), nullable=True)

    customer = relationship("Customer", back_populates="orders")
    details = relationship(
        "OrderDetail",
        back_populates="order",
        cascade="all",
        order_by="OrderDetail.id",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status!r}>"


class OrderDetail(Base):
    """
    Order line item.

    Attributes:
        id: Primary key identifier
        order_id: Owning order
        laptop_id: Ordered laptop, NULL once the laptop is removed
        quantity: Units ordered
        unit_price: Price per unit at order time
    """

    __tablename__ = "order_details"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    laptop_id = Column(
        Integer, ForeignKey("laptops.id", ondelete="SET NULL"), nullable=True
    )
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)

    order = relationship("Order", back_populates="details")
    laptop = relationship("Laptop", back_populates="order_details")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_details_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_order_details_price_non_negative"),
    )

    @property
    def line_total(self) -> Decimal:
        """Quantity times unit price."""
        return Decimal(self.quantity) * Decimal(self.unit_price)

    def __repr__(self) -> str:
        return f"<OrderDetail id={self.id} order_id={self.order_id} laptop_id={self.laptop_id}>"


class User(Base):
    """
    Application user account.

    Not part of the catalog or order graph.

    Attributes:
        id: Primary key identifier
        username: Unique login name
        password_hash: bcrypt hash of the password
        role: Role name, see ``laptopshop.domain.roles.Role``
        full_name: Display name
        email: Contact email
        created_date: Timestamp of account creation (database default now)
        is_active: Whether the account may log in (database default true)
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=True)
    created_date = Column(DateTime, server_default=func.now())
    is_active = Column(Boolean, nullable=False, server_default=true())

    def set_password(self, password: str) -> None:
        """Store a bcrypt hash of ``password``."""
        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        """Check ``password`` against the stored hash."""
        if not self.password_hash:
            return False
        return verify_password(password, self.password_hash)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role!r}>"
