"""Helpers shared by the purchase order use cases: caller scoping,
pagination and entity-to-response conversion."""

from dataclasses import dataclass

from storeledger.application.dto.responses import (
    PurchaseOrderItemResponse,
    PurchaseOrderResponse,
    ReceiptResponse,
)
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.purchase_order import PurchaseOrder, PurchaseOrderItem
from storeledger.core.entities.supplier import Supplier
from storeledger.core.exceptions import (
    ForbiddenError,
    PurchaseOrderNotFoundError,
    SupplierNotFoundError,
)
from storeledger.core.interfaces.unit_of_work import IUnitOfWork
from storeledger.core.services.po_state_machine import PurchaseOrderStateMachine
from storeledger.core.services.receiving_engine import ReceiptResult

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class Page:
    """Offset/limit window, clamped to the configured bounds."""

    limit: int
    offset: int

    @classmethod
    def of(
        cls,
        limit: int | None,
        offset: int | None,
        default_size: int = DEFAULT_PAGE_SIZE,
        max_size: int = MAX_PAGE_SIZE,
    ) -> "Page":
        size = default_size if limit is None or limit <= 0 else limit
        return cls(limit=min(size, max_size), offset=max(offset or 0, 0))


def require_store_owner(actor: Actor, operation: str) -> int:
    """Return the owner's store id or raise ForbiddenError."""
    if not actor.is_store_owner:
        raise ForbiddenError(operation, actor.role.value)
    return actor.store_id


async def resolve_supplier(uow: IUnitOfWork, actor: Actor, operation: str) -> Supplier:
    """Find the supplier record linked to a supplier user."""
    if not actor.is_supplier:
        raise ForbiddenError(operation, actor.role.value)
    supplier = await uow.suppliers.get_by_user(actor.user_id)
    if supplier is None:
        raise SupplierNotFoundError(f"user:{actor.user_id}")
    return supplier


async def load_purchase_order(
    uow: IUnitOfWork, actor: Actor, po_id: int, operation: str
) -> PurchaseOrder:
    """Load a purchase order visible to the caller.

    Owners see their store's orders, suppliers see orders addressed to
    them. Anything else is reported as not found.
    """
    if actor.is_store_owner:
        po = await uow.purchase_orders.get(po_id, store_id=actor.store_id)
    elif actor.is_supplier:
        supplier = await resolve_supplier(uow, actor, operation)
        po = await uow.purchase_orders.get(po_id, supplier_id=supplier.id)
    else:
        raise ForbiddenError(operation, actor.role.value)

    if po is None:
        raise PurchaseOrderNotFoundError(po_id)
    return po


def item_to_response(item: PurchaseOrderItem) -> PurchaseOrderItemResponse:
    return PurchaseOrderItemResponse(
        id=item.id,  # type: ignore[arg-type]
        product_id=item.product_id,
        qty=item.qty,
        cost=item.cost,
        quoted_cost=item.quoted_cost,
        effective_cost=item.effective_cost,
        received_qty=item.received_qty,
        remaining_qty=item.remaining_qty,
    )


def po_to_response(
    po: PurchaseOrder, state_machine: PurchaseOrderStateMachine | None = None
) -> PurchaseOrderResponse:
    """Convert a purchase order entity to its API shape."""
    machine = state_machine or PurchaseOrderStateMachine()
    return PurchaseOrderResponse(
        id=po.id,  # type: ignore[arg-type]
        store_id=po.store_id,
        supplier_id=po.supplier_id,
        code=po.code,
        status=po.status.value,
        placed_at=po.placed_at,
        quotation_requested_at=po.quotation_requested_at,
        quotation_submitted_at=po.quotation_submitted_at,
        quotation_approved_at=po.quotation_approved_at,
        quotation_rejected_at=po.quotation_rejected_at,
        subtotal=po.subtotal,
        tax_total=po.tax_total,
        total=po.total,
        notes=po.notes,
        quotation_notes=po.quotation_notes,
        items=[item_to_response(i) for i in po.items],
        allowed_transitions=[t.value for t in machine.available_transitions(po.status)],
        created_at=po.created_at,
        updated_at=po.updated_at,
    )


def receipt_to_response(item_id: int, receipt: ReceiptResult) -> ReceiptResponse:
    return ReceiptResponse(
        item_id=item_id,
        product_id=receipt.product.id,  # type: ignore[arg-type]
        quantity=receipt.entry.delta,
        unit_cost=receipt.entry.unit_cost or 0,
        new_stock=receipt.product.stock,
        new_cost_price=receipt.product.cost_price or 0,
        ledger_entry_id=receipt.entry.id,  # type: ignore[arg-type]
    )
