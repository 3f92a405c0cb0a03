"""
Receive Purchase Order Use Case: incremental goods receipt.

A delivery lists how many units of each line arrived. The whole
delivery is validated before anything is written; each positive line
then bumps the item's received quantity and runs through the receiving
engine, and the order becomes PARTIAL or RECEIVED from the totals.
"""

from dataclasses import dataclass, field

from storeledger.application.dto.requests import ReceivePurchaseOrderRequest
from storeledger.application.dto.responses import ReceivePurchaseOrderResponse
from storeledger.application.use_cases.common import (
    load_purchase_order,
    po_to_response,
    receipt_to_response,
)
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.purchase_order import (
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
)
from storeledger.core.exceptions import (
    InvalidQuantityError,
    PurchaseOrderItemNotFoundError,
    ValidationError,
)
from storeledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from storeledger.core.services.po_state_machine import (
    PurchaseOrderStateMachine,
    Transition,
)
from storeledger.core.services.receiving_engine import ReceiptResult, ReceivingEngine

logger = get_logger(__name__)


@dataclass
class ReceiveResult:
    purchase_order: PurchaseOrder
    audit_entry: AuditLogEntry | None
    receipts: list[tuple[int, ReceiptResult]] = field(default_factory=list)


async def receive_lines(
    uow: IUnitOfWork,
    engine: ReceivingEngine,
    po: PurchaseOrder,
    lines: list[tuple[PurchaseOrderItem, int]],
) -> list[tuple[int, ReceiptResult]]:
    """Book validated quantities against their items and stock.

    Zero quantities are skipped. Items are updated in place with the
    received quantity read back from storage.
    """
    receipts = []
    for item, quantity in lines:
        if quantity == 0:
            continue
        item.received_qty = await uow.purchase_orders.increment_received_qty(item.id, quantity)
        receipt = await engine.receive(
            uow,
            store_id=po.store_id,
            product_id=item.product_id,
            po_id=po.id,
            quantity=quantity,
            unit_cost=item.effective_cost,
        )
        receipts.append((item.id, receipt))
    return receipts


def validate_delivery(
    po: PurchaseOrder, request: ReceivePurchaseOrderRequest
) -> list[tuple[PurchaseOrderItem, int]]:
    """Resolve delivery lines to items, rejecting the whole delivery on any bad line."""
    seen: set[int] = set()
    lines = []
    for line in request.items:
        if line.item_id in seen:
            raise ValidationError("items", "item listed more than once", line.item_id)
        seen.add(line.item_id)

        item = po.get_item(line.item_id)
        if item is None:
            raise PurchaseOrderItemNotFoundError(line.item_id)
        if line.received_qty < 0:
            raise InvalidQuantityError(
                item.id,
                line.received_qty,
                reason="received quantity must not be negative",
            )
        if line.received_qty > item.remaining_qty:
            raise InvalidQuantityError(item.id, line.received_qty, remaining=item.remaining_qty)
        lines.append((item, line.received_qty))
    return lines


class ReceivePurchaseOrderUseCase:
    """Partially (or finally) receive a purchase order."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        engine: ReceivingEngine | None = None,
        state_machine: PurchaseOrderStateMachine | None = None,
    ):
        self._uow_factory = uow_factory
        self._engine = engine or ReceivingEngine()
        self._state_machine = state_machine or PurchaseOrderStateMachine()

    async def execute(
        self, actor: Actor, po_id: int, request: ReceivePurchaseOrderRequest
    ) -> ReceiveResult:
        """Execute receive use case."""
        transition = Transition.PARTIAL_RECEIVE
        self._state_machine.authorize(actor, transition)

        logger.info("receive_purchase_order_started", po_id=po_id, lines=len(request.items))

        async with self._uow_factory() as uow:
            po = await load_purchase_order(uow, actor, po_id, transition.value)
            self._state_machine.check(po, transition)
            previous = po.status

            lines = validate_delivery(po, request)
            receipts = await receive_lines(uow, self._engine, po, lines)

            entry = self._state_machine.apply(po, transition, actor, notes=request.notes)
            if receipts or entry is not None:
                await uow.purchase_orders.update(po)
            if entry is not None:
                entry = await uow.audit_log.append(entry)

        logger.info(
            "receive_purchase_order_complete",
            po_id=po.id,
            previous_status=previous.value,
            new_status=po.status.value,
            units=sum(r.entry.delta for _, r in receipts),
        )
        return ReceiveResult(purchase_order=po, audit_entry=entry, receipts=receipts)

    def to_response(self, result: ReceiveResult) -> ReceivePurchaseOrderResponse:
        """Convert result to API response."""
        return ReceivePurchaseOrderResponse(
            purchase_order=po_to_response(result.purchase_order, self._state_machine),
            receipts=[receipt_to_response(i, r) for i, r in result.receipts],
        )
