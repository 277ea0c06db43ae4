"""
Laptop shop data layer.

Repository and unit-of-work persistence over the catalog, supplier, customer,
order and user aggregates, with role-gated management commands on top.
"""

__version__ = "0.1.0"
