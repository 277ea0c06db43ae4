"""
Service layer - role-gated commands over the repositories.

Every command checks the session context before it touches a store, so a
denied command stages nothing.
"""

from .auth_service import AuthService
from .catalog_service import CatalogService
from .management import (
    CategoryService,
    CustomerService,
    ManagementService,
    SupplierService,
)
from .order_service import OrderLine, OrderService
from .user_admin_service import UserAdminService

__all__ = [
    "AuthService",
    "CatalogService",
    "CategoryService",
    "CustomerService",
    "ManagementService",
    "OrderLine",
    "OrderService",
    "SupplierService",
    "UserAdminService",
]
