"""Core domain entities."""

from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import (
    AuditAction,
    LedgerRefType,
    PurchaseOrderStatus,
    UserRole,
)
from storeledger.core.entities.inventory import (
    Category,
    Product,
    StockLedgerEntry,
    StockReconciliationLine,
)
from storeledger.core.entities.purchase_order import (
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
)
from storeledger.core.entities.supplier import Supplier

__all__ = [
    # Enums
    "PurchaseOrderStatus",
    "UserRole",
    "LedgerRefType",
    "AuditAction",
    # Caller
    "Actor",
    # Purchase order entities
    "PurchaseOrder",
    "PurchaseOrderItem",
    "AuditLogEntry",
    # Inventory entities
    "Category",
    "Product",
    "StockLedgerEntry",
    "StockReconciliationLine",
    # Supplier entities
    "Supplier",
]
