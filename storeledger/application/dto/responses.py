"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class PurchaseOrderItemResponse(BaseModel):
    """Line item of a purchase order."""

    id: int
    product_id: int
    qty: int = Field(..., description="Ordered quantity")
    cost: int = Field(..., description="Baseline unit cost")
    quoted_cost: int | None = Field(default=None, description="Supplier-quoted unit cost")
    effective_cost: int = Field(..., description="Quoted cost if any, else baseline")
    received_qty: int
    remaining_qty: int


class PurchaseOrderResponse(BaseModel):
    """Purchase order with items."""

    id: int
    store_id: int
    supplier_id: int
    code: str
    status: str
    placed_at: datetime | None = None
    quotation_requested_at: datetime | None = None
    quotation_submitted_at: datetime | None = None
    quotation_approved_at: datetime | None = None
    quotation_rejected_at: datetime | None = None
    subtotal: int
    tax_total: int
    total: int
    notes: str | None = None
    quotation_notes: str | None = None
    items: list[PurchaseOrderItemResponse] = Field(default_factory=list)
    allowed_transitions: list[str] = Field(
        default_factory=list,
        description="Transitions legal from the current status",
    )
    created_at: datetime
    updated_at: datetime


class PurchaseOrderListResponse(BaseModel):
    purchase_orders: list[PurchaseOrderResponse]
    total: int
    limit: int
    offset: int


class ReceiptResponse(BaseModel):
    """Stock effect of receiving one line."""

    item_id: int
    product_id: int
    quantity: int
    unit_cost: int
    new_stock: int
    new_cost_price: int
    ledger_entry_id: int


class ReceivePurchaseOrderResponse(BaseModel):
    purchase_order: PurchaseOrderResponse
    receipts: list[ReceiptResponse] = Field(default_factory=list)


class BulkIntakeResponse(BaseModel):
    """Outcome of a bulk intake."""

    purchase_order: PurchaseOrderResponse
    receipts: list[ReceiptResponse] = Field(default_factory=list)
    created_product_ids: list[int] = Field(default_factory=list)
    existing_product_ids: list[int] = Field(default_factory=list)
    created_category_ids: list[int] = Field(default_factory=list)


class AuditLogEntryResponse(BaseModel):
    id: int
    po_id: int
    user_id: int
    action: str
    previous_status: str | None = None
    new_status: str
    notes: str | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    entries: list[AuditLogEntryResponse]
    total: int
    limit: int
    offset: int


class StockLedgerEntryResponse(BaseModel):
    id: int
    product_id: int
    ref_type: str
    ref_id: int
    delta: int
    unit_cost: int | None = None
    created_at: datetime


class StockLedgerListResponse(BaseModel):
    entries: list[StockLedgerEntryResponse]
    total: int
    limit: int
    offset: int


class ReconciliationLineResponse(BaseModel):
    product_id: int
    sku: str | None = None
    title: str
    stock: int
    ledger_total: int
    difference: int


class ReconciliationResponse(BaseModel):
    """Per-product comparison of recorded stock with the ledger."""

    store_id: int
    products_checked: int
    consistent: bool
    mismatches: list[ReconciliationLineResponse] = Field(default_factory=list)


class ComponentHealthResponse(BaseModel):
    status: str
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PURCHASE_ORDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
