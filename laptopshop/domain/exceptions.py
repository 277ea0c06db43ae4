"""
Custom exceptions for the laptop shop domain.

Lookup misses are not exceptions: stores return ``None`` or an empty list.
These exceptions cover constraint breaches surfaced at commit time, an
unreachable database, malformed filters and denied commands.
"""

from typing import Any, Optional


class LaptopShopException(Exception):
    """Base exception for all laptop shop errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConstraintViolationException(LaptopShopException):
    """Raised when a commit breaks a uniqueness, foreign key or not-null rule."""

    def __init__(self, entity: str, reason: Optional[str] = None):
        message = f"Constraint violation on {entity}"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"entity": entity, "reason": reason})


class ConnectivityException(LaptopShopException):
    """Raised when the underlying database cannot be reached."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Database unavailable during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class ValidationException(LaptopShopException):
    """Raised when a command argument is malformed."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Validation failed for {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": str(value), "reason": reason},
        )


class InvalidFilterException(LaptopShopException):
    """Raised when a filter names an unknown field or operator."""

    def __init__(self, field: str, reason: str):
        message = f"Invalid filter on '{field}': {reason}"
        super().__init__(message=message, details={"field": field, "reason": reason})


class EntityNotFoundException(LaptopShopException):
    """Raised by commands that need an existing row to act on."""

    def __init__(self, entity: str, identifier: Any):
        message = f"{entity} not found: {identifier}"
        super().__init__(
            message=message, details={"entity": entity, "identifier": str(identifier)}
        )


class PermissionDeniedException(LaptopShopException):
    """Raised when the current identity lacks a capability."""

    def __init__(self, capability: str, role: Optional[str] = None):
        if role:
            message = f"Role '{role}' lacks capability '{capability}'"
        else:
            message = f"Login required for capability '{capability}'"
        super().__init__(
            message=message, details={"capability": capability, "role": role}
        )
