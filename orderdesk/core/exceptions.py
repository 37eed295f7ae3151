"""
Domain exceptions for the order reconciliation engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class OrderDeskError(Exception):
    """Base exception for all OrderDesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(OrderDeskError):
    """Base exception for storage operations."""

    pass


class OrderNotFoundError(StorageError):
    """Order not found in its domain."""

    def __init__(self, domain: str, order_id: str):
        super().__init__(
            f"Order not found: {domain}/{order_id}",
            code="ORDER_NOT_FOUND",
            details={"domain": domain, "order_id": order_id},
        )


class DuplicateOrderError(StorageError):
    """An order with the same id already exists in the domain."""

    def __init__(self, domain: str, order_id: str):
        super().__init__(
            f"Order already exists: {domain}/{order_id}",
            code="DUPLICATE_ORDER",
            details={"domain": domain, "order_id": order_id},
        )


class DuplicateUnitError(StorageError):
    """Inventory unit code already exists."""

    def __init__(self, code: str):
        super().__init__(
            f"Inventory unit already exists: {code}",
            code="DUPLICATE_UNIT",
            details={"unit_code": code},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConcurrentModificationError(StorageError):
    """A guarded write lost a race against another writer."""

    def __init__(self, resource: str, key: str):
        super().__init__(
            f"Concurrent modification of {resource} '{key}'",
            code="CONCURRENT_MODIFICATION",
            details={"resource": resource, "key": key},
        )


# Reconciliation Exceptions
class ReconciliationError(OrderDeskError):
    """Base exception for exchange/return processing."""

    pass


class InsufficientStockError(ReconciliationError):
    """Not enough available units to satisfy an allocation."""

    def __init__(self, product_id: str, available: int, requested: int):
        super().__init__(
            f"Not enough stock for product {product_id}. "
            f"Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "available": available,
                "requested": requested,
            },
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


# Ledger Exceptions
class LedgerError(OrderDeskError):
    """Ledger notification failed."""

    pass


# Validation Exceptions
class ValidationError(OrderDeskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )
