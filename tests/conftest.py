"""
Test configuration and fixtures
"""

import os

# Set test environment variables BEFORE importing laptopshop modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # Lower rounds for faster tests
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from laptopshop.database import create_session_factory
from laptopshop.domain.roles import Role
from laptopshop.models import (
    Base,
    Category,
    Customer,
    Laptop,
    LaptopSupplier,
    Order,
    OrderDetail,
    Supplier,
    User,
)
from laptopshop.rate_limiter import login_rate_limiter
from laptopshop.session_context import Identity, SessionContext
from laptopshop.unit_of_work import UnitOfWork

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = create_session_factory(engine)


@pytest.fixture(autouse=True)
def reset_login_rate_limiter():
    """Start every test with no recorded login failures"""
    login_rate_limiter.clear()
    yield
    login_rate_limiter.clear()


@pytest.fixture(scope="function")
def tables():
    """Create a fresh schema for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def new_uow(tables):
    """Factory for units of work bound to the test database"""

    def factory() -> UnitOfWork:
        return UnitOfWork(TestingSessionLocal)

    return factory


@pytest.fixture
def uow(new_uow):
    """Open unit of work for the duration of a test"""
    with new_uow() as unit:
        yield unit


@pytest.fixture
def catalog(new_uow):
    """
    Committed catalog: two laptops, three categories, two suppliers.

    Laptop "XPS 15" is filed under Ultrabook and Creator and supplied by
    Tech Distrib. Returns a dict of primary keys.
    """
    with new_uow() as unit:
        ultrabook = Category(name="Ultrabook", description="Thin and light")
        creator = Category(name="Creator", description="Content creation")
        gaming = Category(name="Gaming", description="High refresh, strong GPU")
        tech = Supplier(
            name="Tech Distrib",
            contact_person="Jane Roe",
            email="sales@techdistrib.example",
            phone="555-0100",
            address="1 Supply Way",
        )
        parts = Supplier(name="Parts Direct", contact_person="John Doe")
        xps = Laptop(
            brand="Dell",
            model="XPS 15",
            processor="Intel Core i7-13700H",
            ram="32GB",
            storage="1TB SSD",
            gpu="RTX 4060",
            price=Decimal("2199.99"),
            stock=5,
            description="15 inch creator laptop",
        )
        legion = Laptop(
            brand="Lenovo",
            model="Legion 5",
            processor="AMD Ryzen 7 7840HS",
            ram="16GB",
            storage="512GB SSD",
            gpu="RTX 4070",
            price=Decimal("1499.00"),
            stock=2,
        )
        xps.categories = [ultrabook, creator]
        legion.categories = [gaming]
        for obj in (ultrabook, creator, gaming, tech, parts, xps, legion):
            unit.session.add(obj)
        unit.session.add(
            LaptopSupplier(laptop=xps, supplier=tech, supply_price=Decimal("1800.00"))
        )
        unit.commit()
        return {
            "xps": xps.id,
            "legion": legion.id,
            "ultrabook": ultrabook.id,
            "creator": creator.id,
            "gaming": gaming.id,
            "tech": tech.id,
            "parts": parts.id,
        }


@pytest.fixture
def customer_with_order(new_uow, catalog):
    """Committed customer with one two-line order. Returns primary keys."""
    with new_uow() as unit:
        customer = Customer(
            name="Alice Buyer", email="alice@example.com", phone="555-0199"
        )
        xps = unit.laptops.get_by_id(catalog["xps"])
        legion = unit.laptops.get_by_id(catalog["legion"])
        order = Order(
            customer=customer,
            total_amount=Decimal("3698.99"),
            notes="Deliver before Friday",
            details=[
                OrderDetail(laptop=xps, quantity=1, unit_price=Decimal("2199.99")),
                OrderDetail(laptop=legion, quantity=1, unit_price=Decimal("1499.00")),
            ],
        )
        unit.customers.add(customer)
        unit.orders.add(order)
        unit.commit()
        return {"customer": customer.id, "order": order.id}


def _make_user(username="alice", password="p@ss", role=Role.ADMIN.value, is_active=True):
    user = User(
        username=username,
        role=role,
        full_name=username.title(),
        email=f"{username}@example.com",
        is_active=is_active,
    )
    user.set_password(password)
    return user


@pytest.fixture
def context():
    """Session context with nobody logged in"""
    return SessionContext()


@pytest.fixture
def login_as(context):
    """Log the context in with a given role"""

    def _login(role: Role, username: str = "tester") -> SessionContext:
        context.login(Identity(user_id=1, username=username, role=role.value))
        return context

    return _login


@pytest.fixture
def make_user():
    """Factory for unsaved users with a hashed password"""
    return _make_user


@pytest.fixture
def session_factory():
    """Session factory bound to the test engine"""
    return TestingSessionLocal
