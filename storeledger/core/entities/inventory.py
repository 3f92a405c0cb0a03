"""Inventory domain entities.

Money is held in integer minor units (paise) throughout.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from storeledger.core.clock import utc_now
from storeledger.core.entities.enums import LedgerRefType


class Category(BaseModel):
    """A product category within a store."""

    id: int | None = None
    store_id: int
    name: str
    slug: str
    description: str | None = None
    active: bool = True
    sort_order: int = 0
    created_at: datetime = Field(default_factory=utc_now)


class Product(BaseModel):
    """Tracks stock on hand and weighted average cost for a store product."""

    id: int | None = None
    store_id: int
    category_id: int | None = None
    supplier_id: int | None = None
    sku: str | None = None
    title: str
    description: str | None = None
    selling_price: int = 0
    cost_price: int | None = None  # unset until the first receipt
    stock: int = 0
    active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def stock_value(self) -> int:
        """Inventory value = stock * cost_price."""
        return self.stock * (self.cost_price or 0)


class StockLedgerEntry(BaseModel):
    """One immutable inventory delta for a product."""

    id: int | None = None
    store_id: int
    product_id: int
    ref_type: LedgerRefType
    ref_id: int  # originating PO or order id
    delta: int  # positive for receipts
    unit_cost: int | None = None
    created_at: datetime = Field(default_factory=utc_now)


class StockReconciliationLine(BaseModel):
    """Ledger total vs. recorded stock for one product."""

    product_id: int
    sku: str | None = None
    title: str
    stock: int
    ledger_total: int

    @property
    def difference(self) -> int:
        return self.stock - self.ledger_total

    @property
    def is_consistent(self) -> bool:
        return self.difference == 0
