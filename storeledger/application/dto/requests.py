"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
Money fields are integer minor units (paise).

Counts and amounts are bounded so that line totals, order totals and
the stored stock valuation stay within SQLite's signed 64-bit INTEGER.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

MAX_ID = 2**63 - 1
MAX_QUANTITY = 1_000_000
MAX_UNIT_AMOUNT = 10**10
MAX_LINES = 500
MAX_ORDER_AMOUNT = MAX_LINES * MAX_QUANTITY * MAX_UNIT_AMOUNT

EntityId = Annotated[int, Field(gt=0, le=MAX_ID)]


def _clean_notes(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class NotesMixin(BaseModel):
    notes: str | None = Field(
        default=None,
        max_length=2000,
        description="Free-text note recorded in the audit log",
    )

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v: str | None) -> str | None:
        return _clean_notes(v)


class PurchaseOrderLineRequest(BaseModel):
    """One product line of a new purchase order."""

    product_id: int = Field(..., gt=0, le=MAX_ID, description="Product ID in the caller's store")
    qty: int = Field(..., gt=0, le=MAX_QUANTITY, description="Ordered quantity")
    cost: int = Field(
        default=0,
        ge=0,
        le=MAX_UNIT_AMOUNT,
        description="Baseline unit cost, 0 until quoted",
    )


class CreatePurchaseOrderRequest(NotesMixin):
    """Request to create a draft purchase order."""

    supplier_id: int = Field(..., gt=0, le=MAX_ID, description="Supplier of the caller's store")
    items: list[PurchaseOrderLineRequest] = Field(..., min_length=1, max_length=MAX_LINES)


class TransitionRequest(NotesMixin):
    """Body of a plain status transition (send, ship, approve, cancel, ...)."""

    pass


class ConfirmPurchaseOrderRequest(NotesMixin):
    """Confirm a shipped order as fully received or rejected."""

    status: Literal["received", "rejected"] = Field(
        ..., description="Outcome of the delivery"
    )


class ReceiveLineRequest(BaseModel):
    """Quantity arriving now for one line item."""

    item_id: int = Field(..., le=MAX_ID, description="Purchase order item ID")
    received_qty: int = Field(..., le=MAX_QUANTITY, description="Units received in this delivery")


class ReceivePurchaseOrderRequest(NotesMixin):
    """Incremental (partial) goods receipt."""

    items: list[ReceiveLineRequest] = Field(..., min_length=1, max_length=MAX_LINES)


class SubmitQuotationRequest(NotesMixin):
    """Supplier quotation: unit cost per purchase order item ID."""

    quotation: dict[EntityId, Annotated[int, Field(le=MAX_UNIT_AMOUNT)]] = Field(
        ...,
        description="Map of item ID to quoted unit cost; non-positive costs are ignored",
        examples=[{"101": 12500, "102": 9900}],
    )


class BulkIntakeLineRequest(BaseModel):
    """A product already bought and in hand."""

    category: str = Field(..., min_length=1, max_length=200, description="Category name")
    sku: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=300)
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)
    unit_cost: int = Field(..., ge=0, le=MAX_UNIT_AMOUNT, description="Unit cost paid")
    description: str | None = Field(default=None, max_length=5000)
    price: int | None = Field(
        default=None,
        ge=0,
        le=MAX_UNIT_AMOUNT,
        description="Selling price for new products (defaults to cost x markup)",
    )

    @field_validator("category", "sku", "title")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class BulkIntakeRequest(NotesMixin):
    """Record an offline purchase that is already paid and received."""

    supplier_id: int = Field(..., gt=0, le=MAX_ID)
    total_amount: int = Field(..., ge=0, le=MAX_ORDER_AMOUNT, description="Amount actually paid")
    items: list[BulkIntakeLineRequest] = Field(..., min_length=1, max_length=MAX_LINES)
