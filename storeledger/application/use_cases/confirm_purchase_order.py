"""Confirm Purchase Order Use Case: a shipped order arrives or is refused."""

from storeledger.application.dto.requests import ConfirmPurchaseOrderRequest
from storeledger.application.dto.responses import ReceivePurchaseOrderResponse
from storeledger.application.use_cases.common import (
    load_purchase_order,
    po_to_response,
    receipt_to_response,
)
from storeledger.application.use_cases.receive_purchase_order import (
    ReceiveResult,
    receive_lines,
)
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from storeledger.core.services.po_state_machine import (
    PurchaseOrderStateMachine,
    Transition,
)
from storeledger.core.services.receiving_engine import ReceivingEngine

logger = get_logger(__name__)


class ConfirmPurchaseOrderUseCase:
    """
    Confirm delivery of a SHIPPED order.

    ``received`` books every line's remaining quantity into stock and
    marks the order RECEIVED; ``rejected`` marks it REJECTED without
    touching stock. Only SHIPPED orders can be confirmed; incremental
    deliveries go through ReceivePurchaseOrderUseCase instead.
    """

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
        self, actor: Actor, po_id: int, request: ConfirmPurchaseOrderRequest
    ) -> ReceiveResult:
        """Execute confirm use case."""
        transition = (
            Transition.CONFIRM_RECEIVED
            if request.status == "received"
            else Transition.CONFIRM_REJECTED
        )
        self._state_machine.authorize(actor, transition)

        async with self._uow_factory() as uow:
            po = await load_purchase_order(uow, actor, po_id, transition.value)
            self._state_machine.check(po, transition)
            previous = po.status

            receipts = []
            if transition == Transition.CONFIRM_RECEIVED:
                lines = [(item, item.remaining_qty) for item in po.items]
                receipts = await receive_lines(uow, self._engine, po, lines)

            entry = self._state_machine.apply(po, transition, actor, notes=request.notes)
            await uow.purchase_orders.update(po)
            if entry is not None:
                entry = await uow.audit_log.append(entry)

        logger.info(
            "purchase_order_confirmed",
            po_id=po.id,
            outcome=request.status,
            previous_status=previous.value,
            new_status=po.status.value,
            lines_received=len(receipts),
        )
        return ReceiveResult(purchase_order=po, audit_entry=entry, receipts=receipts)

    def to_response(self, result: ReceiveResult) -> ReceivePurchaseOrderResponse:
        """Convert result to API response."""
        return ReceivePurchaseOrderResponse(
            purchase_order=po_to_response(result.purchase_order, self._state_machine),
            receipts=[receipt_to_response(i, r) for i, r in result.receipts],
        )
