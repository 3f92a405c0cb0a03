"""
Purchase order status transitions without stock effects.

Each use case here loads the caller's order, asks the state machine to
apply one transition and stores the order and its audit entry in a
single unit of work. Subclasses only name their transition and, where
needed, touch extra fields before the status moves.
"""

from dataclasses import dataclass

from storeledger.application.dto.requests import TransitionRequest
from storeledger.application.dto.responses import PurchaseOrderResponse
from storeledger.application.use_cases.common import load_purchase_order, po_to_response
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.purchase_order import AuditLogEntry, PurchaseOrder
from storeledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from storeledger.core.services.po_state_machine import (
    PurchaseOrderStateMachine,
    Transition,
)

logger = get_logger(__name__)


@dataclass
class TransitionResult:
    """Order after the transition and the audit entry written for it."""

    purchase_order: PurchaseOrder
    audit_entry: AuditLogEntry | None


class PurchaseOrderTransitionUseCase:
    """Base for single-step status transitions."""

    transition: Transition

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        state_machine: PurchaseOrderStateMachine | None = None,
    ):
        self._uow_factory = uow_factory
        self._state_machine = state_machine or PurchaseOrderStateMachine()

    async def execute(
        self, actor: Actor, po_id: int, request: TransitionRequest | None = None
    ) -> TransitionResult:
        """Apply the transition to the caller's purchase order."""
        request = request or TransitionRequest()
        self._state_machine.authorize(actor, self.transition)

        async with self._uow_factory() as uow:
            po = await load_purchase_order(uow, actor, po_id, self.transition.value)
            previous = po.status
            self._state_machine.check(po, self.transition)

            await self._before_apply(uow, po, request)
            entry = self._state_machine.apply(po, self.transition, actor, notes=request.notes)

            await uow.purchase_orders.update(po)
            if entry is not None:
                entry = await uow.audit_log.append(entry)

        logger.info(
            "po_transition_applied",
            po_id=po.id,
            transition=self.transition.value,
            previous_status=previous.value,
            new_status=po.status.value,
            user_id=actor.user_id,
        )
        return TransitionResult(purchase_order=po, audit_entry=entry)

    async def _before_apply(
        self, uow: IUnitOfWork, po: PurchaseOrder, request: TransitionRequest
    ) -> None:
        """Hook for transition-specific field changes. Runs after the precondition check."""
        pass

    def to_response(self, result: TransitionResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return po_to_response(result.purchase_order, self._state_machine)


class RequestQuotationUseCase(PurchaseOrderTransitionUseCase):
    """DRAFT -> QUOTATION_REQUESTED (owner)."""

    transition = Transition.REQUEST_QUOTATION


class RequestRevisionUseCase(PurchaseOrderTransitionUseCase):
    """Ask the supplier to revise a submitted quotation (owner)."""

    transition = Transition.REQUEST_REVISION

    async def _before_apply(
        self, uow: IUnitOfWork, po: PurchaseOrder, request: TransitionRequest
    ) -> None:
        po.quotation_notes = request.notes


class ApproveQuotationUseCase(PurchaseOrderTransitionUseCase):
    transition = Transition.APPROVE_QUOTATION


class RejectQuotationUseCase(PurchaseOrderTransitionUseCase):
    transition = Transition.REJECT_QUOTATION


class SendPurchaseOrderUseCase(PurchaseOrderTransitionUseCase):
    """DRAFT -> SENT, stamping placed_at (owner)."""

    transition = Transition.SEND


class ShipPurchaseOrderUseCase(PurchaseOrderTransitionUseCase):
    """SENT or QUOTATION_APPROVED -> SHIPPED (linked supplier)."""

    transition = Transition.SHIP


class CancelPurchaseOrderUseCase(PurchaseOrderTransitionUseCase):
    transition = Transition.CANCEL


class ClosePurchaseOrderUseCase(PurchaseOrderTransitionUseCase):
    transition = Transition.CLOSE
