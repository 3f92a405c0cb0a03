"""Canonical enumerations shared across the whole core.

These are the only declarations of purchase order status, user role and
ledger reference type; every layer imports them from here.
"""

from enum import Enum


class PurchaseOrderStatus(str, Enum):
    """Lifecycle status of a purchase order."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    SHIPPED = "SHIPPED"
    PARTIAL = "PARTIAL"
    RECEIVED = "RECEIVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"
    QUOTATION_REQUESTED = "QUOTATION_REQUESTED"
    QUOTATION_SUBMITTED = "QUOTATION_SUBMITTED"
    QUOTATION_APPROVED = "QUOTATION_APPROVED"
    QUOTATION_REJECTED = "QUOTATION_REJECTED"
    QUOTATION_REVISION_REQUESTED = "QUOTATION_REVISION_REQUESTED"

    @classmethod
    def quotation_statuses(cls) -> frozenset["PurchaseOrderStatus"]:
        """Statuses a supplier sees as quotation requests."""
        return frozenset(s for s in cls if s.value.startswith("QUOTATION_"))


class UserRole(str, Enum):
    """Role of an authenticated caller."""

    STORE_OWNER = "STORE_OWNER"
    SUPPLIER = "SUPPLIER"
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class LedgerRefType(str, Enum):
    """What kind of document produced a stock ledger entry."""

    PO_RECEIPT = "PO_RECEIPT"
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"


class AuditAction(str, Enum):
    """Action names recorded in the purchase order audit log."""

    CREATED = "created"
    QUOTATION_REQUESTED = "quotation_requested"
    QUOTATION_SUBMITTED = "quotation_submitted"
    QUOTATION_REVISION_REQUESTED = "quotation_revision_requested"
    QUOTATION_APPROVED = "quotation_approved"
    QUOTATION_REJECTED = "quotation_rejected"
    SENT = "sent"
    SHIPPED = "shipped"
    RECEIVED = "received"
    PARTIALLY_RECEIVED = "partially_received"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    CLOSED = "closed"
    BULK_RECEIVED = "bulk_received"
