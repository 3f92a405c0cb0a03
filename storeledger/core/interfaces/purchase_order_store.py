"""Abstract interfaces for purchase order and audit log storage."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from storeledger.core.entities.enums import PurchaseOrderStatus
from storeledger.core.entities.purchase_order import AuditLogEntry, PurchaseOrder


class IPurchaseOrderStore(ABC):
    """Interface for purchase order header and line item persistence."""

    @abstractmethod
    async def create(self, po: PurchaseOrder) -> PurchaseOrder:
        """Insert a purchase order with all its items, assigning ids."""
        pass

    @abstractmethod
    async def get(
        self,
        po_id: int,
        store_id: int | None = None,
        supplier_id: int | None = None,
    ) -> PurchaseOrder | None:
        """Get a purchase order with items, optionally scoped to a store or supplier."""
        pass

    @abstractmethod
    async def update(self, po: PurchaseOrder) -> PurchaseOrder:
        """Persist header fields (status, milestones, totals, notes)."""
        pass

    @abstractmethod
    async def update_item_quoted_cost(self, item_id: int, quoted_cost: int) -> None:
        """Set the supplier-quoted unit cost of a line item."""
        pass

    @abstractmethod
    async def increment_received_qty(self, item_id: int, delta: int) -> int:
        """Add delta to a line's received quantity and return the new value.

        Must refuse (InvalidQuantityError) if the result would exceed the
        ordered quantity as currently stored.
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        """Check whether a purchase order code is already taken."""
        pass

    @abstractmethod
    async def count_for_store(
        self, store_id: int, status: PurchaseOrderStatus | None = None
    ) -> int:
        """Count a store's purchase orders."""
        pass

    @abstractmethod
    async def list_for_store(
        self,
        store_id: int,
        status: PurchaseOrderStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        """List a store's purchase orders, newest first."""
        pass

    @abstractmethod
    async def count_for_supplier(
        self,
        supplier_id: int,
        statuses: Iterable[PurchaseOrderStatus] | None = None,
    ) -> int:
        """Count purchase orders addressed to a supplier."""
        pass

    @abstractmethod
    async def list_for_supplier(
        self,
        supplier_id: int,
        statuses: Iterable[PurchaseOrderStatus] | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        """List purchase orders addressed to a supplier, newest first."""
        pass


class IAuditLogStore(ABC):
    """Interface for the append-only purchase order audit log."""

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Record an audit entry."""
        pass

    @abstractmethod
    async def list_for_po(
        self, po_id: int, limit: int = 50, offset: int = 0
    ) -> list[AuditLogEntry]:
        """Get a purchase order's history, newest first."""
        pass

    @abstractmethod
    async def count_for_po(self, po_id: int) -> int:
        """Count a purchase order's audit entries."""
        pass
