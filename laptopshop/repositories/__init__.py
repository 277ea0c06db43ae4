"""
Repository layer - Data access abstractions.

This layer provides interfaces for data persistence and retrieval,
hiding implementation details from the business logic.
"""

from .base import IRepository
from .changeset import ChangeSet, commit_session
from .filters import Filter, FilterGroup, FilterSpec, Not, where
from .laptop_repository import LaptopRepository
from .order_repository import OrderRepository
from .sqlalchemy_repository import Repository
from .user_repository import UserRepository

__all__ = [
    "ChangeSet",
    "Filter",
    "FilterGroup",
    "FilterSpec",
    "IRepository",
    "LaptopRepository",
    "Not",
    "OrderRepository",
    "Repository",
    "UserRepository",
    "commit_session",
    "where",
]
