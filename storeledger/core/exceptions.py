"""
Domain exceptions for the StoreLedger application.

Every expected, caller-recoverable failure of a purchase order or stock
operation is one of these types. The API layer maps them to HTTP status
codes; nothing below the API layer formats HTTP responses.
"""

from typing import Any


class StoreLedgerError(Exception):
    """Base exception for all StoreLedger errors."""

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


# Lookup Exceptions
class NotFoundError(StoreLedgerError):
    """Entity does not exist or is outside the caller's scope."""

    entity = "Entity"
    error_code = "NOT_FOUND"

    def __init__(self, entity_id: Any = None):
        super().__init__(
            f"{self.entity} not found: {entity_id}",
            code=self.error_code,
            details={"id": entity_id},
        )


class PurchaseOrderNotFoundError(NotFoundError):
    """Purchase order not found in the caller's store or supplier scope."""

    entity = "Purchase order"
    error_code = "PURCHASE_ORDER_NOT_FOUND"


class PurchaseOrderItemNotFoundError(NotFoundError):
    """Line item is not part of the purchase order."""

    entity = "Purchase order item"
    error_code = "PURCHASE_ORDER_ITEM_NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Product not found in the store."""

    entity = "Product"
    error_code = "PRODUCT_NOT_FOUND"


class SupplierNotFoundError(NotFoundError):
    """Supplier not found in the store, or user not linked to a supplier."""

    entity = "Supplier"
    error_code = "SUPPLIER_NOT_FOUND"


# Authorization Exceptions
class ForbiddenError(StoreLedgerError):
    """Caller is authenticated but their role may not perform the operation."""

    def __init__(self, operation: str, role: str | None = None):
        super().__init__(
            f"Role '{role}' is not allowed to {operation}",
            code="FORBIDDEN",
            details={"operation": operation, "role": role},
        )


# Workflow Exceptions
class WorkflowError(StoreLedgerError):
    """Base exception for purchase order workflow violations."""

    pass


class InvalidTransitionError(WorkflowError):
    """Requested transition is not legal from the current status."""

    def __init__(
        self,
        transition: str,
        current_status: str,
        allowed_from: list[str] | None = None,
        po_id: int | None = None,
    ):
        super().__init__(
            f"Cannot {transition.replace('_', ' ')} a purchase order in status {current_status}",
            code="INVALID_TRANSITION",
            details={
                "po_id": po_id,
                "transition": transition,
                "current_status": current_status,
                "allowed_from": sorted(allowed_from or []),
            },
        )


class InvalidQuantityError(WorkflowError):
    """Receiving quantity is negative or exceeds what remains on the line."""

    def __init__(
        self,
        item_id: int | None,
        requested: int,
        remaining: int | None = None,
        reason: str | None = None,
    ):
        if reason is None:
            reason = (
                f"cannot receive {requested}, only {remaining} remaining"
                if remaining is not None
                else f"invalid quantity {requested}"
            )
        super().__init__(
            f"Invalid quantity for item {item_id}: {reason}",
            code="INVALID_QUANTITY",
            details={
                "item_id": item_id,
                "requested": requested,
                "remaining": remaining,
            },
        )


class CodeGenerationExhaustedError(WorkflowError):
    """A unique purchase order code could not be generated."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Failed to generate a unique purchase order code after {attempts} attempts",
            code="CODE_GENERATION_EXHAUSTED",
            details={"attempts": attempts},
        )


# Storage Exceptions
class StorageError(StoreLedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConcurrentModificationError(StorageError):
    """A guarded update found the row changed since it was read."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently",
            code="CONCURRENT_MODIFICATION",
            details={"entity": entity, "id": entity_id},
        )


# Validation Exceptions
class ValidationError(StoreLedgerError):
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


class ConfigurationError(StoreLedgerError):
    """Configuration error."""

    pass
