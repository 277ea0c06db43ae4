"""
Roles and capabilities.

The role to capability table is fixed in code. Catalog mutation is a separate,
narrower rule than catalog access: Sales can browse the catalog but not edit it.
"""

from enum import Enum
from typing import Dict, FrozenSet


class Role(str, Enum):
    """Roles a user account can hold."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    WAREHOUSE = "Warehouse"
    SALES = "Sales"


class Capability(str, Enum):
    """Areas of the application a session may be allowed to use."""

    CATALOG_READ = "catalog:read"
    CATALOG_WRITE = "catalog:write"
    ORDERS = "orders"
    CUSTOMERS = "customers"
    CATEGORIES = "categories"
    SUPPLIERS = "suppliers"
    USERS = "users"


# Roles that may access each area
CAPABILITY_ROLES: Dict[Capability, FrozenSet[Role]] = {
    Capability.CATALOG_READ: frozenset(
        {Role.ADMIN, Role.MANAGER, Role.WAREHOUSE, Role.SALES}
    ),
    Capability.ORDERS: frozenset({Role.ADMIN, Role.MANAGER, Role.SALES}),
    Capability.CUSTOMERS: frozenset({Role.ADMIN, Role.SALES}),
    Capability.CATEGORIES: frozenset({Role.ADMIN, Role.MANAGER}),
    Capability.SUPPLIERS: frozenset({Role.ADMIN, Role.MANAGER, Role.WAREHOUSE}),
    Capability.USERS: frozenset({Role.ADMIN}),
}

# Roles with catalog access that only get a read-only view
READ_ONLY_CATALOG_ROLES: FrozenSet[Role] = frozenset({Role.SALES})


def roles_for(capability: Capability) -> FrozenSet[Role]:
    """
    Get the roles granted a capability.

    ``CATALOG_WRITE`` is derived from catalog access minus the read-only roles.

    Args:
        capability: Capability to look up

    Returns:
        Set of roles holding the capability
    """
    if capability == Capability.CATALOG_WRITE:
        return CAPABILITY_ROLES[Capability.CATALOG_READ] - READ_ONLY_CATALOG_ROLES
    return CAPABILITY_ROLES[capability]
