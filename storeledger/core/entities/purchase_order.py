"""Purchase order domain entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from storeledger.core.clock import utc_now
from storeledger.core.entities.enums import AuditAction, PurchaseOrderStatus


class PurchaseOrderItem(BaseModel):
    """A single ordered product on a purchase order."""

    id: int | None = None
    po_id: int | None = None
    product_id: int
    qty: int  # ordered quantity, fixed at creation
    cost: int = 0  # baseline unit cost
    quoted_cost: int | None = None  # supplier-proposed unit cost
    received_qty: int = 0  # cumulative, 0 <= received_qty <= qty

    @property
    def effective_cost(self) -> int:
        """Negotiated unit cost: the quotation if any, else the baseline."""
        return self.quoted_cost if self.quoted_cost is not None else self.cost

    @property
    def remaining_qty(self) -> int:
        return self.qty - self.received_qty

    @property
    def is_fully_received(self) -> bool:
        return self.received_qty >= self.qty

    @property
    def line_total(self) -> int:
        return self.effective_cost * self.qty


class PurchaseOrder(BaseModel):
    """A procurement order from a store to one of its suppliers."""

    id: int | None = None
    store_id: int
    supplier_id: int
    code: str
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT

    # Milestones
    placed_at: datetime | None = None
    quotation_requested_at: datetime | None = None
    quotation_submitted_at: datetime | None = None
    quotation_approved_at: datetime | None = None
    quotation_rejected_at: datetime | None = None

    # Totals in minor units
    subtotal: int = 0
    tax_total: int = 0
    total: int = 0

    notes: str | None = None
    quotation_notes: str | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def get_item(self, item_id: int) -> PurchaseOrderItem | None:
        """Find a line item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @property
    def is_fully_received(self) -> bool:
        return bool(self.items) and all(i.is_fully_received for i in self.items)

    @property
    def has_receipts(self) -> bool:
        return any(i.received_qty > 0 for i in self.items)


class AuditLogEntry(BaseModel):
    """Immutable record of one purchase order status change."""

    id: int | None = None
    po_id: int
    user_id: int
    action: AuditAction
    previous_status: PurchaseOrderStatus | None = None  # None on creation
    new_status: PurchaseOrderStatus
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
